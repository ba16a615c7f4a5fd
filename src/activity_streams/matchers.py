"""Pure predicates for IRIs, media types, language tags and verb tokens."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

_TOKEN_RE = re.compile(r"^(?:[A-Za-z0-9\-._~]|%[0-9A-Fa-f]{2}|[!$&'()*+,;=])+$")
_MIME_NAME = r"[A-Za-z0-9][A-Za-z0-9!#$&^_.+\-]{0,126}"
_MIME_RE = re.compile(
    rf"^{_MIME_NAME}/{_MIME_NAME}(?:\s*;\s*[A-Za-z0-9!#$&^_.+\-]+=(?:[^;\s]+|\"[^\"]*\"))*$"
)
_LANGUAGE_TAG_RE = re.compile(r"^[A-Za-z]{1,8}(?:-[A-Za-z0-9]{1,8})*$")
_WHITESPACE_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def parse_iri(value: object) -> SplitResult | None:
    """Parse an IRI into its components.

    Args:
        value: Candidate value.

    Returns:
        Split components, or ``None`` when the value is not a parseable IRI string.
    """
    if not isinstance(value, str) or _WHITESPACE_RE.search(value):
        return None
    try:
        parts = urlsplit(value)
        # Accessing the port validates it; urlsplit defers that check.
        _ = parts.port
    except ValueError:
        return None
    return parts


def is_iri(value: object) -> bool:
    """Return True when value parses as an IRI reference (relative allowed)."""
    return parse_iri(value) is not None


def is_absolute_iri(value: object) -> bool:
    """Return True when value parses as an IRI with a scheme."""
    parts = parse_iri(value)
    return parts is not None and bool(parts.scheme)


def is_token(value: object) -> bool:
    """Return True when the stringified value is a non-empty URI-safe token."""
    if value is None:
        return False
    return _TOKEN_RE.match(str(value)) is not None


def is_verb(value: object) -> bool:
    """Return True for verb tokens (``post``) or absolute IRIs."""
    if is_token(value):
        return True
    return is_absolute_iri(value)


def is_mime_type(value: object) -> bool:
    """Return True when value looks like ``type/subtype`` with optional parameters."""
    return isinstance(value, str) and _MIME_RE.match(value) is not None


def is_language_tag(value: object) -> bool:
    """Return True when value is a well-formed BCP 47 style language tag."""
    return isinstance(value, str) and _LANGUAGE_TAG_RE.match(value) is not None
