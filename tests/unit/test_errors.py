"""Error contracts."""

import pytest

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


@pytest.mark.unit
@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ValidationFailedError("rating", 7.5), StreamsErrorCode.VALIDATION_FAILED),
        (InvalidTypeError("actor", "x"), StreamsErrorCode.INVALID_TYPE),
        (ImmutableDocumentError(), StreamsErrorCode.IMMUTABLE_DOCUMENT),
        (UnknownOperationError("to_ary"), StreamsErrorCode.UNKNOWN_OPERATION),
        (SchemaRegistryError("missing"), StreamsErrorCode.UNKNOWN_SCHEMA),
        (CatalogError("bad"), StreamsErrorCode.CATALOG_INVALID),
        (SettingsError("bad"), StreamsErrorCode.SETTINGS_INVALID),
    ],
)
def test_errors_carry_stable_codes(error: StreamsError, code: StreamsErrorCode) -> None:
    """Every error exposes its stable code and is a StreamsError."""
    assert isinstance(error, StreamsError)
    assert error.code is code


@pytest.mark.unit
def test_validation_errors_are_value_errors() -> None:
    """Validation failures can be caught as ValueError and carry the property."""
    error = InvalidTypeError("actor", 42)
    assert isinstance(error, ValueError)
    assert isinstance(error, ValidationFailedError)
    assert error.data == {"name": "actor", "value": 42}
    assert str(error) == "Invalid value for property 'actor': 42"
