"""Tests for structured logging helpers."""

import json
import logging

import pytest

from imiccharge.logging_utils import JSONFormatter, log_api_request, log_error


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def capture():
    logger = logging.getLogger("imiccharge.tests.logging")
    logger.setLevel(logging.DEBUG)
    handler = ListHandler()
    logger.addHandler(handler)
    yield logger, handler
    logger.removeHandler(handler)


@pytest.mark.unit
class TestLoggingUtils:
    """Test event logging helpers and the JSON formatter."""

    def test_api_request_event(self, capture):
        logger, handler = capture

        log_api_request(logger, "list_chargers", "GET", "api/Charge/chargers", status=200, duration=0.0123)

        record = handler.records[0]
        assert record.event_type == "api_request"
        assert record.event_data == {
            "operation": "list_chargers",
            "method": "GET",
            "path": "api/Charge/chargers",
            "status": 200,
            "duration_ms": 12.3,
        }

    def test_error_event_skips_none_fields(self, capture):
        logger, handler = capture

        log_error(logger, "transport", "boom", operation="login", status=None)

        record = handler.records[0]
        assert record.levelno == logging.ERROR
        assert record.event_data == {"error_type": "transport", "operation": "login"}

    def test_formatter_merges_event_data(self, capture):
        logger, handler = capture
        log_error(logger, "decode", "bad body", operation="get_account_balance")

        output = json.loads(JSONFormatter().format(handler.records[0]))

        assert output["level"] == "ERROR"
        assert output["message"] == "bad body"
        assert output["event_type"] == "error"
        assert output["error_type"] == "decode"
        assert output["operation"] == "get_account_balance"
        assert "timestamp" in output
