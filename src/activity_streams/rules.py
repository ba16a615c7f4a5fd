"""Property rules: one declarative descriptor per schema field, plus builders."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias
from urllib.parse import urlunsplit

from activity_streams.matchers import is_absolute_iri, is_iri, parse_iri
from activity_streams.values import (
    ValueKind,
    classify,
    is_mapping_like,
    parse_timestamp,
    recorded_type_tag,
    render_timestamp,
)

Predicate: TypeAlias = Callable[[Any], bool]
Transform: TypeAlias = Callable[[Any], Any]

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


class RuleKind(StrEnum):
    """Kinds of property rules the combinators produce."""

    STRING = "string"
    DATE_TIME = "date_time"
    ABSOLUTE_IRI = "absolute_iri"
    IRI = "iri"
    OBJECT = "object"
    OBJECT_ARRAY = "object_array"
    STRING_ARRAY = "string_array"
    NUMERIC = "numeric"
    NON_NEGATIVE_INT = "non_negative_int"
    BOUNDED_FLOAT = "bounded_float"
    BOOLEAN = "boolean"


class RangePolicy(StrEnum):
    """How bounded numeric fields treat out-of-range values."""

    REJECT = "reject"
    CLAMP = "clamp"


def _identity(value: Any) -> Any:
    return value


def _always(_value: Any) -> bool:
    return True


@dataclass(frozen=True)
class PropertyRule:
    """Validation, normalization and naming for one property.

    ``type_check`` guards the value's shape (reported as an invalid type) and
    ``check`` its content. Both receive the transformed value; ``None`` is
    always accepted because assigning it clears the property.
    """

    name: str
    kind: RuleKind
    alias: str | None = None
    transform: Transform = _identity
    check: Predicate = _always
    type_check: Predicate | None = None
    merge: bool = False
    object_type: str | None = None
    child_type: str | None = None
    range_policy: RangePolicy | None = None
    minimum: float | None = None
    maximum: float | None = None

    @property
    def wire_name(self) -> str:
        """Serialized JSON key for this property."""
        return self.alias or self.name

    def normalize(self, value: Any) -> Any:
        """Apply the transform; ``None`` passes through untouched."""
        if value is None:
            return None
        return self.transform(value)

    def accepts_type(self, value: Any) -> bool:
        """Return True when the value has an acceptable shape."""
        if value is None or self.type_check is None:
            return True
        return bool(self.type_check(value))

    def is_valid(self, value: Any) -> bool:
        """Return True when the value passes both shape and content checks."""
        if value is None:
            return True
        return self.accepts_type(value) and bool(self.check(value))


def _object_matches(value: Any, object_type: str | None) -> bool:
    if not is_mapping_like(value):
        return False
    return object_type is None or recorded_type_tag(value) == object_type


def _as_list(value: Any) -> Any:
    if classify(value) is ValueKind.SEQUENCE:
        return list(value)
    return value


def _canonical_iri(value: Any) -> Any:
    parts = parse_iri(value)
    if parts is None:
        return value
    return urlunsplit(parts)


def _normalize_timestamp(value: Any) -> Any:
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return render_timestamp(parsed)


def _is_timestamp(value: Any) -> bool:
    return parse_timestamp(value) is not None


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    if classify(value) is not ValueKind.NUMBER:
        return False
    return not isinstance(value, float) or math.isfinite(value)


def string_rule(
    name: str, alias: str | None = None, check: Predicate | None = None
) -> PropertyRule:
    """Stringify the value; optionally check the resulting string."""
    return PropertyRule(
        name=name,
        kind=RuleKind.STRING,
        alias=alias,
        transform=str,
        check=check or _always,
    )


def date_time_rule(name: str, alias: str | None = None) -> PropertyRule:
    """Normalize to an ISO-8601 string; unparseable input is left unchanged."""
    return PropertyRule(
        name=name,
        kind=RuleKind.DATE_TIME,
        alias=alias,
        transform=_normalize_timestamp,
        check=_is_timestamp,
        type_check=lambda v: classify(v) in (ValueKind.STRING, ValueKind.TIMESTAMP),
    )


def absolute_iri_rule(name: str, alias: str | None = None) -> PropertyRule:
    """Canonicalize an IRI that must carry a scheme."""
    return PropertyRule(
        name=name,
        kind=RuleKind.ABSOLUTE_IRI,
        alias=alias,
        transform=_canonical_iri,
        check=is_absolute_iri,
        type_check=_is_string,
    )


def iri_rule(name: str, alias: str | None = None) -> PropertyRule:
    """Canonicalize an IRI reference; relative references are allowed."""
    return PropertyRule(
        name=name,
        kind=RuleKind.IRI,
        alias=alias,
        transform=_canonical_iri,
        check=is_iri,
        type_check=_is_string,
    )


def object_rule(
    name: str,
    alias: str | None = None,
    object_type: str | None = None,
    child_type: str | None = None,
) -> PropertyRule:
    """Require a mapping or finished document, optionally of one object type.

    The check is shallow; nested content was validated when it was built.
    """
    return PropertyRule(
        name=name,
        kind=RuleKind.OBJECT,
        alias=alias,
        type_check=lambda v: _object_matches(v, object_type),
        object_type=object_type,
        child_type=child_type or object_type,
    )


def object_array_rule(
    name: str,
    alias: str | None = None,
    object_type: str | None = None,
    child_type: str | None = None,
) -> PropertyRule:
    """Require a list of objects; assignments append to the existing list."""
    return PropertyRule(
        name=name,
        kind=RuleKind.OBJECT_ARRAY,
        alias=alias,
        transform=_as_list,
        type_check=lambda v: isinstance(v, list)
        and all(_object_matches(item, object_type) for item in v),
        merge=True,
        object_type=object_type,
        child_type=child_type or object_type,
    )


def string_array_rule(
    name: str, alias: str | None = None, check: Predicate | None = None
) -> PropertyRule:
    """Require a list of strings; assignments append to the existing list."""

    def _stringify(value: Any) -> Any:
        value = _as_list(value)
        if isinstance(value, list):
            return [str(item) for item in value]
        return value

    def _check(value: Any) -> bool:
        return check is None or all(check(item) for item in value)

    return PropertyRule(
        name=name,
        kind=RuleKind.STRING_ARRAY,
        alias=alias,
        transform=_stringify,
        check=_check,
        type_check=lambda v: isinstance(v, list),
        merge=True,
    )


def numeric_rule(
    name: str, alias: str | None = None, check: Predicate | None = None
) -> PropertyRule:
    """Require a finite int or float (booleans excluded)."""
    return PropertyRule(
        name=name,
        kind=RuleKind.NUMERIC,
        alias=alias,
        check=check or _always,
        type_check=_is_number,
    )


def non_negative_int_rule(name: str, alias: str | None = None) -> PropertyRule:
    """Require an integer greater than or equal to zero."""
    return PropertyRule(
        name=name,
        kind=RuleKind.NON_NEGATIVE_INT,
        alias=alias,
        check=lambda v: v >= 0,
        type_check=lambda v: isinstance(v, int) and not isinstance(v, bool),
        minimum=0,
    )


def bounded_float_rule(
    name: str,
    minimum: float,
    maximum: float,
    alias: str | None = None,
    policy: RangePolicy = RangePolicy.REJECT,
) -> PropertyRule:
    """Require a number within ``[minimum, maximum]``.

    With ``RangePolicy.REJECT`` out-of-range values fail validation; with
    ``RangePolicy.CLAMP`` they are moved to the nearest bound.
    """
    if minimum > maximum:
        raise ValueError(f"Invalid bounds for {name!r}: {minimum} > {maximum}")

    def _clamp(value: Any) -> Any:
        if not _is_number(value):
            return value
        return min(max(value, minimum), maximum)

    return PropertyRule(
        name=name,
        kind=RuleKind.BOUNDED_FLOAT,
        alias=alias,
        transform=_clamp if policy is RangePolicy.CLAMP else _identity,
        check=lambda v: minimum <= v <= maximum,
        type_check=_is_number,
        range_policy=policy,
        minimum=minimum,
        maximum=maximum,
    )


def boolean_rule(name: str, alias: str | None = None) -> PropertyRule:
    """Coerce flags such as ``"true"`` or ``0`` to booleans."""

    def _coerce(value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            return value
        if _is_number(value):
            return bool(value)
        return value

    return PropertyRule(
        name=name,
        kind=RuleKind.BOOLEAN,
        alias=alias,
        transform=_coerce,
        type_check=lambda v: isinstance(v, bool),
    )
