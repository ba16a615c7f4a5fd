"""Document builders (open) and finished documents (frozen).

Every assignment on a builder runs through the same pipeline: embed finished
nested documents, normalize timestamps and durations, find the rule by
assignment or wire name, transform, validate (strict mode only), then store
under the wire name. Array rules append instead of replacing.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator, Mapping
from datetime import timedelta
from typing import IO, TYPE_CHECKING, Any

from activity_streams.canonical import document_digest
from activity_streams.durations import Duration
from activity_streams.errors import (
    ImmutableDocumentError,
    InvalidTypeError,
    UnknownOperationError,
    ValidationFailedError,
)
from activity_streams.rules import PropertyRule, RuleKind
from activity_streams.schema import Schema
from activity_streams.values import (
    OBJECT_TYPE_KEY,
    PendingDocument,
    TypedMapping,
    ValueKind,
    classify,
    recorded_type_tag,
    render_timestamp,
)

if TYPE_CHECKING:
    from activity_streams.registry import SchemaRegistry

_LOGGER = logging.getLogger(__name__)

LINK_TYPE_TAG = "link"
_ACCESSOR_PREFIXES = ("to_", "alias_for_")


def _default_registry() -> SchemaRegistry:
    from activity_streams.context import default_context

    return default_context().registry


def _detach(value: Any) -> Any:
    """Copy raw containers so later caller mutation cannot reach stored values."""
    match classify(value):
        case ValueKind.MAPPING:
            return {key: _detach(item) for key, item in value.items()}
        case ValueKind.SEQUENCE:
            return [_detach(item) for item in value]
        case _:
            return value


def plain_values(value: Any) -> Any:
    """Convert stored values (finished documents included) to plain JSON data."""
    match classify(value):
        case ValueKind.DOCUMENT | ValueKind.MAPPING:
            return {key: plain_values(item) for key, item in value.items()}
        case ValueKind.SEQUENCE:
            return [plain_values(item) for item in value]
        case _:
            return value


def _prepare(name: str, value: Any) -> Any:
    """Embed nested documents and normalize timestamps and durations.

    Raw containers are walked in full. Open builders and values without a JSON
    form (non-finite floats, arbitrary objects, non-string keys) raise
    InvalidTypeError whatever the validation mode.
    """
    match classify(value):
        case ValueKind.PENDING_DOCUMENT:
            raise InvalidTypeError(
                name, value, f"Nested document for {name!r} must be finished first"
            )
        case ValueKind.OTHER:
            raise InvalidTypeError(
                name,
                value,
                f"Unsupported value type for property {name!r}: {type(value).__name__}",
            )
        case ValueKind.NUMBER if isinstance(value, float) and not math.isfinite(value):
            raise InvalidTypeError(
                name, value, f"Property {name!r} requires a finite number"
            )
        case ValueKind.TIMESTAMP:
            return render_timestamp(value)
        case ValueKind.DURATION:
            if isinstance(value, timedelta):
                value = Duration.from_timedelta(value)
            return value.total_seconds
        case ValueKind.SEQUENCE:
            return [_prepare(name, item) for item in value]
        case ValueKind.MAPPING:
            for key in value:
                if not isinstance(key, str):
                    raise InvalidTypeError(
                        name, value, f"Keys nested in {name!r} must be strings"
                    )
            return {key: _prepare(name, item) for key, item in value.items()}
        case _:
            return value


class Document(TypedMapping):
    """A finished, immutable Activity Streams object.

    Keys are wire names in assignment order. Nested objects are themselves
    Documents (or plain mappings when they were assigned raw).
    """

    __slots__ = ("_type_tag", "_values", "_schema", "_strict", "_pretty", "_registry")

    def __init__(
        self,
        type_tag: str | None,
        values: Mapping[str, Any],
        *,
        schema: Schema,
        strict: bool = True,
        pretty: bool = False,
        registry: SchemaRegistry | None = None,
    ) -> None:
        self._type_tag = type_tag
        self._values = dict(values)
        self._schema = schema
        self._strict = strict
        self._pretty = pretty
        self._registry = registry

    @property
    def type_tag(self) -> str | None:
        return self._type_tag

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def pretty(self) -> bool:
        return self._pretty

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def registry(self) -> SchemaRegistry | None:
        return self._registry

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str, default: Any = None) -> Any:
        """Return a property by assignment or wire name."""
        return self._values.get(self._schema.wire_name(name), default)

    def has(self, name: str) -> bool:
        """Return True when the property is present."""
        return self._schema.wire_name(name) in self._values

    def to_dict(self) -> dict[str, Any]:
        """Return the values as plain, independent JSON data."""
        return plain_values(self._values)

    def to_text(self, pretty: bool | None = None) -> str:
        """Serialize to JSON text; ``pretty`` defaults to the document's flag."""
        from activity_streams.serializer import to_text

        return to_text(self, pretty)

    def write_to(self, stream: IO[str]) -> IO[str]:
        """Append the JSON text to a writable stream and return the stream."""
        from activity_streams.serializer import write_to

        return write_to(self, stream)

    def copy(self, *omit: str) -> DocumentBuilder:
        """Return an open builder seeded with these values minus ``omit``."""
        return copy_from(self, *omit)

    def set(self, name: str, value: Any, skip_validation: bool = False) -> None:
        raise ImmutableDocumentError()

    def unset(self, name: str) -> None:
        raise ImmutableDocumentError()

    def __setitem__(self, key: str, value: Any) -> None:
        raise ImmutableDocumentError()

    def __delitem__(self, key: str) -> None:
        raise ImmutableDocumentError()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self.to_dict() == plain_values(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(document_digest(self.to_dict()))

    def __repr__(self) -> str:
        return f"Document(type_tag={self._type_tag!r}, values={self._values!r})"

    def __str__(self) -> str:
        return self.to_text()


class DocumentBuilder(PendingDocument):
    """An open document: assign properties, then ``finish()`` it.

    The builder binds to the schema registered for its type tag when it is
    created; later registrations do not affect it. Builders are not thread-safe.
    """

    def __init__(
        self,
        type_tag: str | None = None,
        *,
        registry: SchemaRegistry | None = None,
        include_object_type: bool = True,
        strict: bool = True,
        pretty: bool = False,
        on_finish: Callable[[Document], None] | None = None,
    ) -> None:
        """Open a builder.

        Args:
            type_tag: Object-type tag selecting the schema (``None``: base schema).
            registry: Schema source; defaults to the process-wide registry.
            include_object_type: Record ``objectType`` in the values.
            strict: Validate every assignment.
            pretty: Serialize with indentation by default.
            on_finish: Called once with the finished document.
        """
        self._registry = registry if registry is not None else _default_registry()
        self._type_tag = type_tag
        self._schema = self._registry.lookup(type_tag)
        self._values: dict[str, Any] = {}
        self._strict = strict
        self._pretty = pretty
        self._on_finish = on_finish
        self._document: Document | None = None
        if include_object_type and type_tag is not None:
            self._values[OBJECT_TYPE_KEY] = type_tag

    @property
    def type_tag(self) -> str | None:
        return self._type_tag

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    @property
    def is_strict(self) -> bool:
        return self._strict

    @property
    def is_pretty(self) -> bool:
        return self._pretty

    @property
    def is_finished(self) -> bool:
        return self._document is not None

    def _ensure_open(self) -> None:
        if self._document is not None:
            raise ImmutableDocumentError()

    def strict(self) -> DocumentBuilder:
        """Validate subsequent assignments."""
        self._ensure_open()
        self._strict = True
        return self

    def lenient(self) -> DocumentBuilder:
        """Skip validation for subsequent assignments."""
        self._ensure_open()
        self._strict = False
        return self

    def pretty(self, enabled: bool = True) -> DocumentBuilder:
        """Toggle indented serialization."""
        self._ensure_open()
        self._pretty = enabled
        return self

    def set(self, name: str, value: Any, skip_validation: bool = False) -> DocumentBuilder:
        """Assign one property through the validation pipeline.

        Args:
            name: Assignment or wire name.
            value: Raw value; ``None`` removes the property.
            skip_validation: Store without checking, even in strict mode.

        Returns:
            This builder.

        Raises:
            ImmutableDocumentError: If the builder is finished.
            InvalidTypeError: If the value has the wrong shape or is an open
                builder.
            ValidationFailedError: If the value fails its check.
        """
        self._ensure_open()
        rule = self._schema.rule_for(name)
        if value is None:
            self._values.pop(self._schema.wire_name(name), None)
            return self
        value = _prepare(name, value)
        if rule is not None:
            value = rule.normalize(value)
        validate = self._strict and not skip_validation
        if validate:
            self._validate(name, rule, value)
        elif rule is not None and rule.kind is RuleKind.DATE_TIME and not rule.is_valid(value):
            _LOGGER.warning(
                "Storing unrecognized timestamp for %r without normalization: %r",
                name,
                value,
            )
        self._store(rule.wire_name if rule is not None else name, rule, value)
        return self

    def _validate(self, name: str, rule: PropertyRule | None, value: Any) -> None:
        if rule is None:
            if not self._schema.missing_check(value):
                _LOGGER.debug("Rejected %r on %r: missing check", name, self._type_tag)
                raise ValidationFailedError(name, value)
            return
        if not rule.accepts_type(value):
            _LOGGER.debug("Rejected %r on %r: invalid type", name, self._type_tag)
            raise InvalidTypeError(name, value, self._type_message(name, rule, value))
        if not rule.is_valid(value):
            _LOGGER.debug("Rejected %r on %r: check failed", name, self._type_tag)
            raise ValidationFailedError(name, value)

    @staticmethod
    def _type_message(name: str, rule: PropertyRule, value: Any) -> str:
        if rule.object_type is not None:
            found = recorded_type_tag(value)
            if found is not None and found != rule.object_type:
                return (
                    f"Property {name!r} requires object type {rule.object_type!r}, "
                    f"got {found!r}"
                )
        return f"Invalid type for property {name!r}: {type(value).__name__}"

    def _store(self, key: str, rule: PropertyRule | None, value: Any) -> None:
        value = _detach(value)
        if value is None:
            self._values.pop(key, None)
            return
        if rule is not None and rule.merge:
            existing = self._values.get(key)
            merged = list(existing) if isinstance(existing, list) else []
            if isinstance(value, list):
                merged.extend(value)
            else:
                merged.append(value)
            self._values[key] = merged
            return
        self._values[key] = value

    def unset(self, name: str) -> DocumentBuilder:
        """Remove a property (same as assigning ``None``)."""
        return self.set(name, None)

    def update(
        self, mapping: Mapping[str, Any] | None = None, /, **props: Any
    ) -> DocumentBuilder:
        """Assign several properties in order; keyword arguments come last."""
        for name, value in (mapping or {}).items():
            self.set(name, value)
        for name, value in props.items():
            self.set(name, value)
        return self

    def has(self, name: str) -> bool:
        """Return True when the property is present."""
        return self._schema.wire_name(name) in self._values

    def get(self, name: str, default: Any = None) -> Any:
        """Return the current value of a property by assignment or wire name."""
        return self._values.get(self._schema.wire_name(name), default)

    def apply(self, name: str, *args: Any) -> Any:
        """Dispatch a named operation.

        ``"name?"`` tests presence. One argument assigns; a second argument
        is the ``skip_validation`` flag.

        Raises:
            UnknownOperationError: For ``to_*``/``alias_for_*`` names or any
                other argument count.
        """
        if name.endswith("?"):
            if args:
                raise UnknownOperationError(f"{name} takes no arguments")
            return self.has(name[:-1])
        if name.startswith(_ACCESSOR_PREFIXES):
            raise UnknownOperationError(f"Unknown operation: {name}")
        if not 1 <= len(args) <= 2:
            raise UnknownOperationError(
                f"{name} takes 1 or 2 arguments ({len(args)} given)"
            )
        return self.set(name, args[0], bool(args[1]) if len(args) == 2 else False)

    def child(
        self,
        name: str,
        type_tag: str | None = None,
        *,
        include_object_type: bool = False,
    ) -> DocumentBuilder:
        """Open a nested builder whose finished document is assigned to ``name``.

        For array properties the nested document is appended.

        Args:
            name: Property receiving the nested document.
            type_tag: Nested object type; defaults to the rule's child type.
            include_object_type: Record ``objectType`` in the nested values.

        Returns:
            The nested builder. Use it as a context manager or call finish().
        """
        self._ensure_open()
        rule = self._schema.rule_for(name)
        if type_tag is None and rule is not None:
            type_tag = rule.child_type
        merge = rule is not None and rule.merge
        return DocumentBuilder(
            type_tag,
            registry=self._registry,
            include_object_type=include_object_type,
            strict=self._strict,
            pretty=self._pretty,
            on_finish=lambda document: self.set(name, [document] if merge else document),
        )

    def link(self, rel: str, *, include_object_type: bool = False) -> DocumentBuilder:
        """Open a nested ``link`` builder stored under the relation ``rel``."""
        return self.child(rel, LINK_TYPE_TAG, include_object_type=include_object_type)

    def finish(self) -> Document:
        """Freeze the builder and return the Document.

        Idempotent: later calls return the same Document.
        """
        if self._document is not None:
            return self._document
        document = Document(
            self._type_tag,
            self._values,
            schema=self._schema,
            strict=self._strict,
            pretty=self._pretty,
            registry=self._registry,
        )
        if self._on_finish is not None:
            self._on_finish(document)
        self._document = document
        return document

    freeze = finish

    def __enter__(self) -> DocumentBuilder:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if exc_type is None:
            self.finish()

    def __repr__(self) -> str:
        state = "finished" if self.is_finished else "open"
        return f"DocumentBuilder(type_tag={self._type_tag!r}, {state}, values={self._values!r})"


def copy_from(source: Document | Mapping[str, Any], *omit: str) -> DocumentBuilder:
    """Open a builder seeded from a finished document or raw mapping.

    The type tag, mode flags and registry carry over from a Document; a raw
    mapping uses its ``objectType`` and the default registry. Values are
    replayed through the pipeline, except names in ``omit`` (assignment or
    wire names).
    """
    if isinstance(source, Document):
        builder = DocumentBuilder(
            source.type_tag,
            registry=source.registry,
            include_object_type=False,
            strict=source.strict,
            pretty=source.pretty,
        )
    else:
        builder = DocumentBuilder(recorded_type_tag(source), include_object_type=False)
    skipped = {builder.schema.wire_name(name) for name in omit}
    for key, value in source.items():
        if key not in skipped:
            builder.set(key, value)
    return builder
