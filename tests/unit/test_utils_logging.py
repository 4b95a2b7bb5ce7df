"""Unit tests for the logging setup."""

import logging
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from issue_sync.utils.logging import configure_logging


@pytest.mark.parametrize(
    "level,expected",
    [
        pytest.param("debug", logging.DEBUG, id="debug"),
        pytest.param("INFO", logging.INFO, id="upper case"),
        pytest.param("warn", logging.WARNING, id="warn alias"),
        pytest.param("error", logging.ERROR, id="error"),
        pytest.param("chatty", logging.INFO, id="unknown level"),
    ],
)
def test_configure_logging_level(monkeypatch: MonkeyPatch, level: str, expected: int) -> None:
    """Test that the standard library logger is configured at the requested level."""
    basic_config = MagicMock()
    monkeypatch.setattr("issue_sync.utils.logging.logging.basicConfig", basic_config)

    configure_logging(level)

    assert basic_config.call_args.kwargs["level"] == expected
