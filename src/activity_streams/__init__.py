"""Schema-driven builder, validator and serializer for Activity Streams documents."""

from activity_streams.catalog import build_registry, load_catalog
from activity_streams.config import StreamsSettings, load_settings
from activity_streams.context import (
    StreamsContext,
    default_context,
    default_registry,
    set_default_context,
)
from activity_streams.document import Document, DocumentBuilder, copy_from
from activity_streams.durations import Duration, hours, minutes, seconds
from activity_streams.errors import (
    CatalogError,
    ImmutableDocumentError,
    InvalidTypeError,
    SchemaRegistryError,
    SettingsError,
    StreamsError,
    StreamsErrorCode,
    UnknownOperationError,
    ValidationFailedError,
)
from activity_streams.factories import make, new_document
from activity_streams.observability import configure_logging
from activity_streams.registry import SchemaRegistry
from activity_streams.rules import (
    PropertyRule,
    RangePolicy,
    RuleKind,
    absolute_iri_rule,
    boolean_rule,
    bounded_float_rule,
    date_time_rule,
    iri_rule,
    non_negative_int_rule,
    numeric_rule,
    object_array_rule,
    object_rule,
    string_array_rule,
    string_rule,
)
from activity_streams.schema import Schema, compose
from activity_streams.serializer import from_text, to_text, write_to
from activity_streams.values import now

__all__ = [
    "CatalogError",
    "Document",
    "DocumentBuilder",
    "Duration",
    "ImmutableDocumentError",
    "InvalidTypeError",
    "PropertyRule",
    "RangePolicy",
    "RuleKind",
    "Schema",
    "SchemaRegistry",
    "SchemaRegistryError",
    "SettingsError",
    "StreamsContext",
    "StreamsError",
    "StreamsErrorCode",
    "StreamsSettings",
    "UnknownOperationError",
    "ValidationFailedError",
    "absolute_iri_rule",
    "boolean_rule",
    "bounded_float_rule",
    "build_registry",
    "compose",
    "configure_logging",
    "copy_from",
    "date_time_rule",
    "default_context",
    "default_registry",
    "from_text",
    "hours",
    "iri_rule",
    "load_catalog",
    "load_settings",
    "make",
    "minutes",
    "new_document",
    "non_negative_int_rule",
    "now",
    "numeric_rule",
    "object_array_rule",
    "object_rule",
    "seconds",
    "set_default_context",
    "string_array_rule",
    "string_rule",
    "to_text",
    "write_to",
]
