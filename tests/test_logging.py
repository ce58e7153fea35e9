"""Tests for filterscope.logging module."""

from __future__ import annotations

import json
import logging

import pytest

from filterscope import (
    FilterScope,
    FilterScopeConfig,
    LogLevel,
    ScopeLogFormatter,
    ScopeLoggerAdapter,
    UserFilterContext,
    get_scope_logger,
    safe_preview,
    setup_logging,
)


def _record(msg: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("filterscope.test", logging.WARNING, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSafePreview:
    """Tests for safe_preview function."""

    def test_none_value(self) -> None:
        assert safe_preview(None) == ""

    def test_string_with_whitespace(self) -> None:
        """Test that whitespace is normalized."""
        assert safe_preview("team\n\tT1  T2") == "team T1 T2"

    def test_string_truncation(self) -> None:
        result = safe_preview("a" * 300, limit=100)
        assert len(result) == 100
        assert result.endswith("…")

    def test_sets_are_sorted(self) -> None:
        """Filter ID sets log in a stable order."""
        assert safe_preview(frozenset({"T2", "T1"})) == '["T1", "T2"]'

    def test_params_with_set_values(self) -> None:
        result = safe_preview({"team_id": frozenset({"T2", "T1"}), "department_id": "D1"})
        assert result == '{"department_id": "D1", "team_id": ["T1", "T2"]}'

    def test_other_value(self) -> None:
        assert safe_preview(42) == "42"


class TestScopeLogFormatter:
    """Tests for ScopeLogFormatter."""

    def test_json_output(self) -> None:
        formatter = ScopeLogFormatter(json_format=True)
        data = json.loads(formatter.format(_record(user_id="u-1", security_event="MISSING_CONTEXT")))
        assert data["message"] == "hello"
        assert data["level"] == "WARNING"
        assert data["user_id"] == "u-1"
        assert data["security_event"] == "MISSING_CONTEXT"

    def test_extra_fields_are_previewed(self) -> None:
        formatter = ScopeLogFormatter(json_format=True)
        data = json.loads(formatter.format(_record(requested_filters={"team_id": "T9"})))
        assert data["requested_filters"] == '{"team_id": "T9"}'

    def test_plain_text_output(self) -> None:
        formatter = ScopeLogFormatter(json_format=False)
        line = formatter.format(_record(user_id="u-1", security_event="MISSING_CONTEXT"))
        assert "security_event=MISSING_CONTEXT" in line
        assert "user_id=u-1" in line
        assert line.endswith(": hello")

    def test_plain_text_without_user(self) -> None:
        line = ScopeLogFormatter(json_format=False).format(_record())
        assert "user_id" not in line


class TestScopeLoggerAdapter:
    """Tests for ScopeLoggerAdapter."""

    def test_default_user_id(self) -> None:
        adapter = get_scope_logger("filterscope.test", user_id="u-1")
        assert isinstance(adapter, ScopeLoggerAdapter)
        _, kwargs = adapter.process("msg", {})
        assert kwargs["extra"]["user_id"] == "u-1"

    def test_user_id_from_context(self) -> None:
        adapter = get_scope_logger("filterscope.test")
        context = UserFilterContext(scope=FilterScope.unrestricted(), user_id="u-2")
        _, kwargs = adapter.process("msg", {"context": context, "extra": {"a": 1}})
        assert kwargs["extra"] == {"a": 1, "user_id": "u-2"}
        assert "context" not in kwargs

    def test_no_user_id(self) -> None:
        _, kwargs = get_scope_logger("filterscope.test").process("msg", {"context": None})
        assert kwargs["extra"] == {}

    def test_records_carry_user_id(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="filterscope.test"):
            get_scope_logger("filterscope.test", user_id="u-3").info("resolved")
        assert caplog.records[-1].user_id == "u-3"


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_installs_single_handler(self) -> None:
        config = FilterScopeConfig(log_level=LogLevel.DEBUG)
        setup_logging(config)
        setup_logging(config)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ScopeLogFormatter)

    def test_json_override(self) -> None:
        setup_logging(FilterScopeConfig(log_json=False), json_format=True)
        assert logging.getLogger().handlers[0].formatter.json_format is True

    def test_service_logger_level(self) -> None:
        setup_logging(FilterScopeConfig(log_level="ERROR", service_name="planner"))
        assert logging.getLogger("planner").level == logging.ERROR
