"""Unit tests for functions defined in src/log.py."""

import logging

import pytest
from rich.logging import RichHandler

from log import get_logger, resolve_log_level, set_log_level


def test_get_logger() -> None:
    """Check the function to retrieve logger."""
    logger_name = "foo"
    logger = get_logger(logger_name)
    assert logger is not None
    assert logger.name == logger_name

    # at least one handler needs to be set
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    assert logger.propagate is False


def test_get_logger_twice_keeps_one_handler() -> None:
    """Check that repeated calls do not stack handlers."""
    get_logger("bar")
    logger = get_logger("bar")
    assert len(logger.handlers) == 1


@pytest.mark.parametrize(
    "value,expected",
    [
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
        (" error ", logging.ERROR),
        ("nonsense", logging.INFO),
    ],
)
def test_resolve_log_level(
    monkeypatch: pytest.MonkeyPatch, value: str, expected: int
) -> None:
    """Check level selection by environment variable."""
    monkeypatch.setenv("MOCKZURE_LOG_LEVEL", value)
    assert resolve_log_level() == expected


def test_resolve_log_level_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """Check the default level."""
    monkeypatch.delenv("MOCKZURE_LOG_LEVEL", raising=False)
    assert resolve_log_level() == logging.INFO


def test_set_log_level() -> None:
    """Check that Rich console loggers follow the new level."""
    logger = get_logger("baz")
    root_level = logging.getLogger().level
    try:
        set_log_level(logging.DEBUG)
        assert logger.level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG
    finally:
        set_log_level(root_level)
