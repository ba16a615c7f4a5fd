"""Shorthand constructors bound to the process-wide context.

Each per-type maker builds and finishes a document in one call::

    note = factories.note(content="hello")
    post = factories.activity(verb="post", obj=note)

Use ``new_document`` when the document needs nested builders or several
steps, and ``StreamsContext`` methods when working with a custom registry.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from activity_streams.context import default_context
from activity_streams.document import Document, DocumentBuilder, copy_from
from activity_streams.values import now

Maker: TypeAlias = Callable[..., Document]

__all__ = [
    "copy_from",
    "make",
    "new_document",
    "now",
]


def new_document(
    type_tag: str | None = None, *, include_object_type: bool = True
) -> DocumentBuilder:
    """Open a builder on the default context."""
    return default_context().new(type_tag, include_object_type=include_object_type)


def make(
    type_tag: str | None = None,
    values: Mapping[str, Any] | None = None,
    /,
    *,
    include_object_type: bool = True,
    **props: Any,
) -> Document:
    """Build and finish a document of any object type."""
    return default_context().make(
        type_tag, values, include_object_type=include_object_type, **props
    )


def _maker(type_tag: str, include_object_type: bool = True) -> Maker:
    def _make(
        values: Mapping[str, Any] | None = None,
        /,
        *,
        include_object_type: bool = include_object_type,
        **props: Any,
    ) -> Document:
        return make(type_tag, values, include_object_type=include_object_type, **props)

    _make.__name__ = _make.__qualname__ = type_tag
    _make.__doc__ = f"Build and finish a {type_tag!r} document."
    return _make


# These omit objectType unless asked for it.
activity = _maker("activity", include_object_type=False)
collection = _maker("collection", include_object_type=False)
media_link = _maker("media_link", include_object_type=False)

alert = _maker("alert")
application = _maker("application")
article = _maker("article")
audio = _maker("audio")
badge = _maker("badge")
binary = _maker("binary")
bookmark = _maker("bookmark")
comment = _maker("comment")
device = _maker("device")
event = _maker("event")
file = _maker("file")
game = _maker("game")
group = _maker("group")
image = _maker("image")
issue = _maker("issue")
job = _maker("job")
link = _maker("link")
links = _maker("links")
note = _maker("note")
offer = _maker("offer")
organization = _maker("organization")
page = _maker("page")
permission = _maker("permission")
person = _maker("person")
place = _maker("place")
process = _maker("process")
product = _maker("product")
question = _maker("question")
review = _maker("review")
role = _maker("role")
service = _maker("service")
task = _maker("task")
team = _maker("team")
video = _maker("video")

__all__ += [
    "activity",
    "alert",
    "application",
    "article",
    "audio",
    "badge",
    "binary",
    "bookmark",
    "collection",
    "comment",
    "device",
    "event",
    "file",
    "game",
    "group",
    "image",
    "issue",
    "job",
    "link",
    "links",
    "media_link",
    "note",
    "offer",
    "organization",
    "page",
    "permission",
    "person",
    "place",
    "process",
    "product",
    "question",
    "review",
    "role",
    "service",
    "task",
    "team",
    "video",
]
