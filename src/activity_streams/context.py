"""Registry and settings held together, plus the process-wide default."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from threading import Lock
from typing import IO, Any

from activity_streams.catalog import build_registry
from activity_streams.config import StreamsSettings
from activity_streams.document import Document, DocumentBuilder
from activity_streams.registry import SchemaRegistry
from activity_streams.schema import Schema
from activity_streams.serializer import from_text, to_text, write_to

_LOGGER = logging.getLogger(__name__)

_DEFAULT_LOCK = Lock()
_DEFAULT_CONTEXT: StreamsContext | None = None


class StreamsContext:
    """Builds, parses and serializes documents against one registry."""

    def __init__(
        self,
        registry: SchemaRegistry | None = None,
        settings: StreamsSettings | None = None,
    ) -> None:
        """Create a context.

        Args:
            registry: Schema registry; built from the bundled catalog plus
                ``settings.catalog_paths`` when omitted.
            settings: Builder and serializer defaults.
        """
        self.settings = settings or StreamsSettings()
        if registry is None:
            registry = build_registry(
                self.settings.catalog_paths,
                range_policy=self.settings.bounded_numbers,
            )
        self.registry = registry

    def register(self, type_tag: str | None, schema: Schema) -> None:
        """Register a schema; affects builders created afterwards."""
        self.registry.register(type_tag, schema)

    def new(
        self, type_tag: str | None = None, *, include_object_type: bool = True
    ) -> DocumentBuilder:
        """Open a builder using this context's registry and mode defaults."""
        return DocumentBuilder(
            type_tag,
            registry=self.registry,
            include_object_type=include_object_type,
            strict=self.settings.strict,
            pretty=self.settings.pretty,
        )

    def make(
        self,
        type_tag: str | None = None,
        values: Mapping[str, Any] | None = None,
        /,
        *,
        include_object_type: bool = True,
        **props: Any,
    ) -> Document:
        """Build and finish a document in one call."""
        builder = self.new(type_tag, include_object_type=include_object_type)
        builder.update(values, **props)
        return builder.finish()

    def from_text(self, text: str) -> Document:
        """Parse JSON text against this context's registry."""
        return from_text(text, registry=self.registry)

    def to_text(self, document: Mapping[str, Any], pretty: bool | None = None) -> str:
        """Serialize with this context's indent and escaping settings."""
        return to_text(
            document,
            pretty,
            indent=self.settings.indent,
            ensure_ascii=self.settings.ensure_ascii,
        )

    def write_to(self, document: Mapping[str, Any], stream: IO[str]) -> IO[str]:
        """Append serialized text to a stream using this context's settings."""
        return write_to(
            document,
            stream,
            indent=self.settings.indent,
            ensure_ascii=self.settings.ensure_ascii,
        )


def default_context() -> StreamsContext:
    """Return the process-wide context, building it on first use."""
    global _DEFAULT_CONTEXT  # noqa: PLW0603
    with _DEFAULT_LOCK:
        if _DEFAULT_CONTEXT is None:
            _LOGGER.debug("Building default streams context")
            _DEFAULT_CONTEXT = StreamsContext()
        return _DEFAULT_CONTEXT


def set_default_context(context: StreamsContext | None) -> StreamsContext | None:
    """Replace the process-wide context; ``None`` rebuilds it lazily.

    Returns:
        The previous context, if one had been built.
    """
    global _DEFAULT_CONTEXT  # noqa: PLW0603
    with _DEFAULT_LOCK:
        previous = _DEFAULT_CONTEXT
        _DEFAULT_CONTEXT = context
        return previous


def default_registry() -> SchemaRegistry:
    """Return the registry of the process-wide context."""
    return default_context().registry
