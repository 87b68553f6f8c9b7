"""
Tests for structured logging setup.
"""

import json
import logging

import pytest
import structlog

from subtracker.logging import get_logger, setup_logging
from subtracker.settings import ObservabilitySettings, Settings

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


def configure(log_format: str, level: str = "INFO") -> None:
    settings = Settings(
        _env_file=None,
        observability=ObservabilitySettings(log_level=level, log_format=log_format),
    )
    setup_logging(settings)


def test_json_output_includes_bound_context(caplog):
    configure("json")
    structlog.contextvars.bind_contextvars(request_id="req-1")

    with caplog.at_level(logging.INFO):
        get_logger("subtracker.test").info("Created subscription", subscription_id="abc")

    record = json.loads(caplog.records[-1].getMessage())
    assert record["event"] == "Created subscription"
    assert record["subscription_id"] == "abc"
    assert record["request_id"] == "req-1"
    assert record["level"] == "info"
    assert record["logger"] == "subtracker.test"
    assert "timestamp" in record


def test_level_filters_lower_records(caplog):
    configure("json", level="WARNING")

    get_logger("subtracker.test").info("hidden")

    assert logging.getLogger().level == logging.WARNING
    assert not [r for r in caplog.records if "hidden" in r.getMessage()]


def test_console_format(caplog):
    configure("console")

    with caplog.at_level(logging.INFO):
        get_logger("subtracker.test").info("console line", price=1000)

    message = caplog.records[-1].getMessage()
    assert "console line" in message
    assert "price" in message
