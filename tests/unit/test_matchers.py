"""IRI, token, MIME type and language tag predicates."""

import pytest

from activity_streams.matchers import (
    is_absolute_iri,
    is_iri,
    is_language_tag,
    is_mime_type,
    is_token,
    is_verb,
    parse_iri,
)


@pytest.mark.unit
def test_parse_iri() -> None:
    """Parseable strings split; other values do not."""
    parts = parse_iri("http://example.com/a?b#c")
    assert parts is not None
    assert (parts.scheme, parts.netloc, parts.path) == ("http", "example.com", "/a")
    assert parse_iri(42) is None
    assert parse_iri("http://example.com:99999/") is None


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "absolute", "reference"),
    [
        ("http://example.com/", True, True),
        ("urn:isbn:0451450523", True, True),
        ("/relative/path", False, True),
        ("has space", False, False),
        ("http://example.com/\n", False, False),
        (None, False, False),
    ],
)
def test_iri_predicates(value, absolute, reference) -> None:
    """Absolute IRIs need a scheme; references only need to parse."""
    assert is_absolute_iri(value) is absolute
    assert is_iri(value) is reference


@pytest.mark.unit
def test_token_and_verb() -> None:
    """Verbs are URI-safe tokens or absolute IRIs."""
    assert is_token("post")
    assert is_token("make-friend")
    assert not is_token("two words")
    assert not is_token("")
    assert not is_token(None)
    assert is_verb("share")
    assert is_verb("http://activitystrea.ms/schema/1.0/post")
    assert not is_verb("not a verb")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("text/html", True),
        ("application/atom+xml", True),
        ("text/html; charset=utf-8", True),
        ("html", False),
        ("text/", False),
        (None, False),
    ],
)
def test_is_mime_type(value, expected) -> None:
    """MIME types are type/subtype with optional parameters."""
    assert is_mime_type(value) is expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [("en", True), ("en-US", True), ("zh-Hant-TW", True), ("en_US", False), ("", False)],
)
def test_is_language_tag(value, expected) -> None:
    """Language tags are hyphen-separated alphanumeric subtags."""
    assert is_language_tag(value) is expected
