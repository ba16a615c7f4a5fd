"""Deterministic error contracts for document building and schema loading."""

from __future__ import annotations

from enum import StrEnum


class StreamsErrorCode(StrEnum):
    """Stable error codes raised by the builder, registry and loaders."""

    VALIDATION_FAILED = "validation_failed"
    INVALID_TYPE = "invalid_type"
    IMMUTABLE_DOCUMENT = "immutable_document"
    UNKNOWN_OPERATION = "unknown_operation"
    UNKNOWN_SCHEMA = "unknown_schema"
    CATALOG_INVALID = "catalog_invalid"
    SETTINGS_INVALID = "settings_invalid"


class StreamsError(RuntimeError):
    """Base failure with stable deterministic code."""

    def __init__(
        self,
        code: StreamsErrorCode,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create streams error.

        Args:
            code: Stable error code.
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.code = code
        self.data = data or {}


class ValidationFailedError(StreamsError, ValueError):
    """Raised when an assigned value fails its property check in strict mode."""

    code_default = StreamsErrorCode.VALIDATION_FAILED

    def __init__(self, name: str, value: object, message: str | None = None) -> None:
        """Create validation failure for one property assignment.

        Args:
            name: Assignment name that was rejected.
            value: Normalized value that failed the check.
            message: Optional override for the default message.
        """
        super().__init__(
            self.code_default,
            message or f"Invalid value for property {name!r}: {value!r}",
            data={"name": name, "value": value},
        )
        self.name = name
        self.value = value


class InvalidTypeError(ValidationFailedError):
    """Raised when a value has the wrong primitive or nested object type."""

    code_default = StreamsErrorCode.INVALID_TYPE


class ImmutableDocumentError(StreamsError):
    """Raised on any mutation attempted after a document was finished."""

    def __init__(self, message: str = "Document is frozen and cannot be modified") -> None:
        super().__init__(StreamsErrorCode.IMMUTABLE_DOCUMENT, message)


class UnknownOperationError(StreamsError):
    """Raised for unsupported argument arity or unrecognized special accessors."""

    def __init__(self, message: str) -> None:
        super().__init__(StreamsErrorCode.UNKNOWN_OPERATION, message)


class SchemaRegistryError(StreamsError):
    """Raised when a type tag is unknown to a strict registry lookup."""

    def __init__(self, message: str) -> None:
        super().__init__(StreamsErrorCode.UNKNOWN_SCHEMA, message)


class CatalogError(StreamsError):
    """Raised when an object-type catalog cannot be decoded or validated."""

    def __init__(self, message: str) -> None:
        super().__init__(StreamsErrorCode.CATALOG_INVALID, message)


class SettingsError(StreamsError):
    """Raised when settings cannot be decoded or validated."""

    def __init__(self, message: str) -> None:
        super().__init__(StreamsErrorCode.SETTINGS_INVALID, message)
