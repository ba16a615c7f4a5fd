"""End-to-end document construction through the public API."""

import io
import json
from datetime import UTC, datetime

import activity_streams as streams
from activity_streams import factories

EXPECTED_POST = (
    '{"objectType":"activity","verb":"post",'
    '"actor":{"objectType":"person","displayName":"Jane"},'
    '"object":{"objectType":"note","content":"hello"}}'
)


def test_post_activity_serializes_compactly():
    """A post by Jane of a note serializes to the expected compact JSON."""
    builder = streams.new_document("activity")
    builder.set("verb", "post")
    builder.set("actor", streams.make("person", display_name="Jane"))
    builder.set("object", streams.make("note", content="hello"))
    assert builder.finish().to_text() == EXPECTED_POST


def test_post_activity_with_nested_builders():
    """Nested builders produce the same document as pre-built values."""
    with streams.new_document("activity") as builder:
        builder.apply("verb", "post")
        with builder.child("actor", "person", include_object_type=True) as actor:
            actor.set("display_name", "Jane")
        with builder.child("obj", "note", include_object_type=True) as note:
            note.set("content", "hello")
    document = builder.finish()
    assert str(document) == EXPECTED_POST
    assert streams.from_text(EXPECTED_POST) == document


def test_feed_collection_round_trip():
    """A collection of activities survives serialization and parsing."""
    published = datetime(2011, 2, 10, 15, 4, 55, tzinfo=UTC)
    posts = [
        factories.activity(
            include_object_type=True,
            verb="post",
            published=published,
            actor=factories.person(display_name=name, url=f"http://example.org/{name}"),
            obj=factories.note(content=f"hello from {name}"),
        )
        for name in ("jane", "joe")
    ]
    feed = factories.collection(
        include_object_type=True, items=posts, total_items=len(posts)
    )
    text = streams.to_text(feed, pretty=True)
    parsed = streams.from_text(text)
    assert parsed == feed
    data = json.loads(text)
    assert data["totalItems"] == 2
    assert data["items"][0]["published"] == "2011-02-10T15:04:55Z"
    assert data["items"][1]["actor"]["url"] == "http://example.org/joe"


def test_media_and_links():
    """Media links, durations and link relations combine in one document."""
    builder = streams.new_document("video")
    stream_link = factories.media_link(
        url="http://example.org/v.mp4", duration=streams.minutes(3)
    )
    builder.set("stream", stream_link)
    with builder.child("links") as links:
        with links.link("alternate") as alternate:
            alternate.set("href", "http://example.org/v.html").set("hreflang", "en")
    stream = builder.finish().write_to(io.StringIO())
    data = json.loads(stream.getvalue())
    assert data["stream"] == {"url": "http://example.org/v.mp4", "duration": 180}
    assert data["links"]["alternate"]["hreflang"] == "en"


def test_copy_then_extend():
    """A finished document can seed a new one with changes."""
    original = streams.make("note", content="draft", summary="s")
    revised = original.copy("summary").set("content", "final").finish()
    assert revised.to_dict() == {"objectType": "note", "content": "final"}
    assert original["content"] == "draft"


def test_default_makers_round_trip():
    """Documents made without objectType read back equal to themselves."""
    post = factories.activity(
        verb="post", actor=factories.person(display_name="Jane")
    )
    feed = factories.collection(items=[post], total_items=1)
    for document in (post, feed):
        parsed = streams.from_text(streams.to_text(document))
        assert parsed == document
        assert hash(parsed) == hash(document)
    assert streams.from_text(streams.to_text(post)).type_tag is None
