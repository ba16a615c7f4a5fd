"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator

import pytest

from activity_streams.catalog import build_registry
from activity_streams.context import StreamsContext, set_default_context
from activity_streams.registry import SchemaRegistry


@pytest.fixture
def registry() -> SchemaRegistry:
    """Fresh registry compiled from the bundled catalog."""
    return build_registry()


@pytest.fixture
def context(registry: SchemaRegistry) -> StreamsContext:
    """Context over the fresh registry with default settings."""
    return StreamsContext(registry=registry)


@pytest.fixture(autouse=True)
def isolated_default_context() -> Iterator[StreamsContext]:
    """Give every test its own process-wide context so registrations never leak."""
    fresh = StreamsContext(registry=build_registry())
    previous = set_default_context(fresh)
    yield fresh
    set_default_context(previous)
