"""JSON-like value variants and timestamp normalization."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from datetime import UTC, date, datetime, timedelta
from enum import StrEnum
from typing import Any, TypeAlias

from activity_streams.durations import Duration

OBJECT_TYPE_KEY = "objectType"

JSONValue: TypeAlias = (
    Mapping[str, "JSONValue"] | Sequence["JSONValue"] | str | int | float | bool | None
)


class ValueKind(StrEnum):
    """Closed set of value shapes the pipeline distinguishes."""

    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    DURATION = "duration"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    DOCUMENT = "document"
    PENDING_DOCUMENT = "pending_document"
    OTHER = "other"


class TypedMapping(Mapping[str, Any], ABC):
    """Read-only mapping that records the object-type tag it was built for."""

    @property
    @abstractmethod
    def type_tag(self) -> str | None:
        """Object-type tag the mapping was built against."""


class PendingDocument(ABC):
    """A document still under construction (not yet finished)."""

    @abstractmethod
    def finish(self) -> TypedMapping:
        """Freeze and return the finished document."""


def classify(value: object) -> ValueKind:
    """Return the value shape, checked in a fixed order.

    Args:
        value: Candidate property value.

    Returns:
        The matching ValueKind.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (datetime, date)):
        return ValueKind.TIMESTAMP
    if isinstance(value, (Duration, timedelta)):
        return ValueKind.DURATION
    if isinstance(value, TypedMapping):
        return ValueKind.DOCUMENT
    if isinstance(value, PendingDocument):
        return ValueKind.PENDING_DOCUMENT
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.OTHER


def is_mapping_like(value: object) -> bool:
    """Return True for raw mappings and finished documents."""
    return classify(value) in (ValueKind.MAPPING, ValueKind.DOCUMENT)


def recorded_type_tag(value: object) -> str | None:
    """Return the object-type tag recorded on a mapping-like value.

    Finished documents carry their tag directly; raw mappings fall back to
    their ``objectType`` key.
    """
    kind = classify(value)
    if kind is ValueKind.DOCUMENT:
        return value.type_tag  # type: ignore[union-attr]
    if kind is ValueKind.MAPPING:
        tag = value.get(OBJECT_TYPE_KEY)  # type: ignore[union-attr]
        return tag if isinstance(tag, str) else None
    return None


def parse_timestamp(value: object) -> datetime | None:
    """Parse a timestamp-like value into an aware datetime.

    Naive datetimes and dates are interpreted as UTC.

    Args:
        value: datetime, date, or ISO-8601 string.

    Returns:
        Aware datetime, or ``None`` when the value is not parseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def render_timestamp(value: datetime | date) -> str:
    """Render a timestamp as ISO-8601, using ``Z`` for UTC."""
    parsed = parse_timestamp(value)
    if parsed is None:
        raise TypeError(f"Not a timestamp: {value!r}")
    text = parsed.isoformat()
    if parsed.utcoffset() == timedelta(0) and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def now() -> datetime:
    """Return the current UTC time truncated to whole seconds."""
    return datetime.now(UTC).replace(microsecond=0)
