"""Tests for observability utilities."""

import json
import logging

from roomledger.observability.correlation import (
    correlation_scope,
    get_correlation_id,
)
from roomledger.observability.logging import (
    ROOT_LOGGER,
    JsonFormatter,
    configure_logging,
)
from roomledger.observability.redaction import (
    redact_string,
    redact_value,
    safe_log_context,
)


class TestRedaction:
    """Tests for redaction helpers."""

    def test_redact_phone_number(self):
        result = redact_string("Call me at +1 415 555-0134")
        assert "555" not in result
        assert "[REDACTED]" in result

    def test_redact_passport_number(self):
        result = redact_string("passport AB1234567 on file")
        assert "1234567" not in result
        assert result == "passport [REDACTED] on file"

    def test_short_numbers_kept(self):
        assert redact_string("room 12 for 3 nights") == "room 12 for 3 nights"

    def test_redact_value_dict_only_keys(self):
        result = redact_value({"passport_number": "X123456", "name": "Ann"})
        assert "X123456" not in result
        assert "Ann" not in result
        assert "passport_number" in result

    def test_redact_value_list_only_len(self):
        result = redact_value(["a", "b", "c"])
        assert "len=3" in result

    def test_redact_value_scalars(self):
        assert redact_value(None) == "null"
        assert redact_value(True) == "true"
        assert redact_value(42) == "42"

    def test_safe_log_context_sensitive_fields(self):
        ctx = safe_log_context(passport_number="P1", phone="12", name="Ann", count=42)
        assert ctx["passport_number"] == "[REDACTED]"
        assert ctx["phone"] == "[REDACTED]"
        assert ctx["name"] == "Ann"
        assert ctx["count"] == "42"

    def test_safe_log_context_none_sensitive_field(self):
        assert safe_log_context(phone=None)["phone"] == "null"


def _record(msg="hello", **extra_fields):
    record = logging.LogRecord("roomledger.test", logging.INFO, __file__, 1, msg, None, None)
    if extra_fields:
        record.extra_fields = extra_fields
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        out = json.loads(JsonFormatter().format(_record()))
        assert out["level"] == "INFO"
        assert out["logger"] == "roomledger.test"
        assert out["message"] == "hello"
        assert "correlationId" not in out

    def test_extra_fields_merged(self):
        out = json.loads(JsonFormatter().format(_record(room_type_id=3, available=4)))
        assert out["room_type_id"] == 3
        assert out["available"] == 4

    def test_correlation_id_included(self):
        with correlation_scope("cid-1"):
            out = json.loads(JsonFormatter().format(_record()))
        assert out["correlationId"] == "cid-1"


class TestCorrelationScope:
    def test_generates_and_resets(self):
        assert get_correlation_id() == ""
        with correlation_scope() as cid:
            assert cid
            assert get_correlation_id() == cid
        assert get_correlation_id() == ""

    def test_nested(self):
        with correlation_scope("outer"):
            with correlation_scope("inner"):
                assert get_correlation_id() == "inner"
            assert get_correlation_id() == "outer"


class TestConfigureLogging:
    def test_single_handler(self):
        logger = configure_logging("DEBUG")
        configure_logging("DEBUG")

        assert logger.name == ROOT_LOGGER
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)
        assert logger.level == logging.DEBUG

    def test_module_loggers_propagate(self):
        configure_logging()
        child = logging.getLogger("roomledger.domain.room_guard")
        assert child.propagate is True
        assert child.parent.name == ROOT_LOGGER
