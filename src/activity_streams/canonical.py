"""Canonical JSON serialization and hashing (deterministic)."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping

from activity_streams.values import JSONValue


def canonical_json_bytes(obj: JSONValue) -> bytes:
    """Serialize to canonical JSON bytes. Deterministic; stable across key order.

    Supported types: mappings, list, tuple, str, int, float, bool, None.
    Raises on unsupported types or NaN/Infinity.

    Args:
        obj: JSON-like structure to serialize.

    Returns:
        UTF-8 encoded canonical JSON bytes.

    Raises:
        TypeError: On unsupported type.
    """
    if obj is not None and not isinstance(
        obj, (Mapping, list, tuple, str, int, float, bool)
    ):
        raise TypeError(f"Unsupported type for canonical JSON: {type(obj).__name__}")

    raw = json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=_plain_mapping,
    )
    return raw.encode("utf-8")


def _plain_mapping(value: object) -> object:
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Unsupported type for canonical JSON: {type(value).__name__}")


def sha256_bytes(data: bytes) -> str:
    """Return hex-encoded SHA-256 hash of data."""
    return hashlib.sha256(data).hexdigest()


def document_digest(values: JSONValue) -> str:
    """Hash a document's values deterministically.

    Args:
        values: Wire-keyed document values.

    Returns:
        Hex-encoded SHA-256 digest of the canonical JSON bytes.
    """
    return sha256_bytes(canonical_json_bytes(values))
