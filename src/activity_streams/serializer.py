"""JSON text serialization of finished documents."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import IO, TYPE_CHECKING, Any

from activity_streams.document import Document, DocumentBuilder, plain_values
from activity_streams.errors import ValidationFailedError
from activity_streams.values import OBJECT_TYPE_KEY

if TYPE_CHECKING:
    from activity_streams.registry import SchemaRegistry

_COMPACT_SEPARATORS = (",", ":")


def to_text(
    document: Mapping[str, Any],
    pretty: bool | None = None,
    *,
    indent: int = 2,
    ensure_ascii: bool = False,
) -> str:
    """Serialize a document to JSON text in insertion order.

    Args:
        document: Finished document or plain mapping.
        pretty: Indent the output; ``None`` uses the document's own flag.
        indent: Spaces per level when pretty.
        ensure_ascii: Escape non-ASCII characters.

    Returns:
        One JSON object.
    """
    data = plain_values(document)
    if pretty is None:
        pretty = document.pretty if isinstance(document, Document) else False
    if pretty:
        return json.dumps(data, indent=indent, ensure_ascii=ensure_ascii)
    return json.dumps(data, separators=_COMPACT_SEPARATORS, ensure_ascii=ensure_ascii)


def write_to(document: Mapping[str, Any], stream: IO[str], **options: Any) -> IO[str]:
    """Append the document's JSON text to a writable text stream.

    Returns:
        The stream, so writes can be chained.
    """
    stream.write(to_text(document, **options))
    return stream


def from_text(text: str, *, registry: SchemaRegistry | None = None) -> Document:
    """Parse a JSON object into a finished document.

    The ``objectType`` value selects the schema. Values are stored leniently
    under their wire names, so any document this package wrote reads back
    equal to itself.

    Args:
        text: JSON text holding one object.
        registry: Schema source; defaults to the process-wide registry.

    Returns:
        A finished Document.

    Raises:
        ValidationFailedError: If the text is not a JSON object.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationFailedError("<document>", text, f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationFailedError(
            "<document>", payload, "Document JSON root must be an object"
        )
    type_tag = payload.get(OBJECT_TYPE_KEY)
    builder = DocumentBuilder(
        type_tag if isinstance(type_tag, str) else None,
        registry=registry,
        include_object_type=False,
        strict=False,
    )
    for key, value in payload.items():
        builder.set(key, value)
    return builder.finish()
