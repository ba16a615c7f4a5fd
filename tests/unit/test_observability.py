"""Logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from activity_streams import observability


@pytest.mark.unit
def test_configure_logging_installs_rich_handler_once(monkeypatch) -> None:
    """configure_logging installs a RichHandler on the first call only."""
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(observability, "_LOGGING_CONFIGURED", False)
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    observability.configure_logging(logging.DEBUG)
    observability.configure_logging()

    assert len(calls) == 1
    assert calls[0]["level"] == logging.DEBUG
    (handler,) = calls[0]["handlers"]
    assert isinstance(handler, RichHandler)
