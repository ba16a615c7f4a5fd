"""Schema registry: object-type tag to Schema, with a base-schema fallback."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from threading import RLock

from activity_streams.errors import SchemaRegistryError
from activity_streams.rules import Predicate
from activity_streams.schema import Schema, compose

_LOGGER = logging.getLogger(__name__)


class SchemaRegistry:
    """In-process registry: type tag -> Schema. Lookups fall back to the base.

    Registration replaces whatever was there before. Builders resolve their
    schema once, when they are created, so a registration only affects
    documents started afterwards.
    """

    def __init__(
        self,
        base: Schema | None = None,
        schemas: Mapping[str, Schema] | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            base: Fallback schema for ``None`` and unregistered tags.
            schemas: Initial registrations.
        """
        self._lock = RLock()
        self._base = base or Schema(type_tag=None)
        self._schemas: dict[str, Schema] = dict(schemas or {})

    @property
    def base(self) -> Schema:
        """Fallback schema."""
        with self._lock:
            return self._base

    def register(self, type_tag: str | None, schema: Schema) -> None:
        """Register schema for type_tag, replacing any existing registration.

        Every document started after this call with the same tag uses the new
        schema. ``type_tag=None`` replaces the base schema.

        Args:
            type_tag: Object-type tag, or ``None`` for the base schema.
            schema: Schema to register.
        """
        with self._lock:
            if type_tag is None:
                _LOGGER.warning("Replacing base schema")
                self._base = schema
                return
            if type_tag in self._schemas:
                _LOGGER.warning("Overriding schema for object type %r", type_tag)
            else:
                _LOGGER.debug("Registering schema for object type %r", type_tag)
            self._schemas[type_tag] = schema

    def lookup(self, type_tag: str | None) -> Schema:
        """Return the schema for type_tag, or the base schema when unknown.

        Args:
            type_tag: Object-type tag.

        Returns:
            The registered Schema or the base Schema.
        """
        with self._lock:
            if type_tag is None:
                return self._base
            return self._schemas.get(type_tag, self._base)

    def get(self, type_tag: str) -> Schema:
        """Return the schema for type_tag. Raises if not registered.

        Args:
            type_tag: Object-type tag.

        Returns:
            The registered Schema.

        Raises:
            SchemaRegistryError: If type_tag is not registered.
        """
        with self._lock:
            if type_tag not in self._schemas:
                raise SchemaRegistryError(f"Unknown object type: {type_tag!r}")
            return self._schemas[type_tag]

    def compose(
        self,
        *parts: Schema | str,
        type_tag: str | None = None,
        missing_check: Predicate | None = None,
    ) -> Schema:
        """Compose registered and/or explicit schemas (later parts win by name).

        Args:
            *parts: Schemas, or type tags resolved with lookup().
            type_tag: Tag of the composed schema.
            missing_check: Missing-property check of the composed schema.

        Returns:
            The composed Schema. Nothing is registered.
        """
        with self._lock:
            schemas = [
                self.lookup(part) if isinstance(part, str) else part for part in parts
            ]
        return compose(*schemas, type_tag=type_tag, missing_check=missing_check)

    def type_tags(self) -> list[str]:
        """Registered type tags in registration order."""
        with self._lock:
            return list(self._schemas)

    def copy(self) -> SchemaRegistry:
        """Return an independent registry with the same registrations."""
        with self._lock:
            return SchemaRegistry(base=self._base, schemas=self._schemas)

    def __contains__(self, type_tag: object) -> bool:
        with self._lock:
            return type_tag in self._schemas

    def __len__(self) -> int:
        with self._lock:
            return len(self._schemas)
