"""Centralized logging utilities for the filter scope engine.

This module provides:
- Logging configuration from FilterScopeConfig
- Safe preview utilities for logged filter values
- Structured logging with user_id and security_event fields
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .config import FilterScopeConfig, LogLevel

_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "user_id", "security_event",
    }
)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(str(v) for v in value)
    if isinstance(value, tuple):
        return list(value)
    return str(value)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Converts any value to a single-line string, normalizes whitespace and
    truncates to ``limit`` characters. Sets are rendered sorted so that
    filter values log deterministically.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A safe, truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple, set, frozenset)):
        try:
            s = json.dumps(value, default=_to_jsonable, ensure_ascii=False, sort_keys=isinstance(value, dict))
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class ScopeLogFormatter(logging.Formatter):
    """Formatter that includes user_id, security_event and extra fields.

    Outputs either one JSON object per record or a plain text line.
    """

    def __init__(self, json_format: bool = True, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        user_id = getattr(record, "user_id", None)
        security_event = getattr(record, "security_event", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if user_id:
            log_data["user_id"] = str(user_id)
        if security_event:
            log_data["security_event"] = security_event

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_preview(value)

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if security_event:
            parts.append(f"security_event={security_event}")
        if user_id:
            parts.append(f"user_id={log_data['user_id']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class ScopeLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds user_id to every record.

    Usage:
        logger = get_scope_logger(__name__)
        logger.info("Resolved scope", context=filter_context)
    """

    def __init__(self, logger: logging.Logger, user_id: Optional[str] = None):
        super().__init__(logger, {})
        self.user_id = user_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        user_id = kwargs.pop("user_id", self.user_id)

        # A UserFilterContext (or anything with a user_id) may be passed directly
        context = kwargs.pop("context", None)
        if context is not None:
            user_id = user_id or getattr(context, "user_id", None)

        extra = dict(kwargs.get("extra") or {})
        if user_id:
            extra["user_id"] = user_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[FilterScopeConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure logging for a process embedding the engine.

    Sets the level from config, installs a single console handler with
    :class:`ScopeLogFormatter` on the root logger.

    Args:
        config: FilterScopeConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        ScopeLogFormatter(json_format=config.log_json if json_format is None else json_format)
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_scope_logger(name: str, user_id: Optional[str] = None) -> ScopeLoggerAdapter:
    """Get a logger adapter that tags records with user_id.

    Args:
        name: Logger name (typically __name__)
        user_id: Optional user_id to include in all logs

    Returns:
        ScopeLoggerAdapter instance
    """
    return ScopeLoggerAdapter(logging.getLogger(name), user_id=user_id)


__all__ = [
    "safe_preview",
    "ScopeLogFormatter",
    "ScopeLoggerAdapter",
    "setup_logging",
    "get_scope_logger",
]
