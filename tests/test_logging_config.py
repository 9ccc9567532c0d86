"""Tests for the structlog configuration helper."""

import io
import json
import logging

import pytest
import structlog

from movie_match.logging_config import configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestConfigureLogging:
    """Both structlog and stdlib records reach the configured stream."""

    def test_structlog_event_as_json(self, restore_logging) -> None:
        stream = io.StringIO()
        configure_logging(json_output=True, log_level="INFO", stream=stream)

        structlog.get_logger("movie_match.test").info("matching_complete", fallback=False)

        record = json.loads(stream.getvalue().splitlines()[-1])
        assert record["event"] == "matching_complete"
        assert record["fallback"] is False
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_stdlib_record_as_json(self, restore_logging) -> None:
        stream = io.StringIO()
        configure_logging(json_output=True, stream=stream)

        logging.getLogger("movie_match.plain").warning("plain message")

        record = json.loads(stream.getvalue().splitlines()[-1])
        assert record["event"] == "plain message"
        assert record["logger"] == "movie_match.plain"

    def test_level_filters_lower_events(self, restore_logging) -> None:
        stream = io.StringIO()
        configure_logging(log_level="warning", stream=stream)

        structlog.get_logger("movie_match.test").info("hidden")

        assert stream.getvalue() == ""
