"""Configuration contract for the filter scope engine.

This module provides a Pydantic-validated configuration model shared by
every component of the engine (log level, blocking sentinel, ID format,
role-combination policy).

Components take an optional ``config`` argument and fall back to
``FilterScopeConfig()`` defaults. Direct os.environ/os.getenv usage is
limited to :func:`load_config_from_env`.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

# Identifier guaranteed to match no stored row. DB constraints must keep it
# out of every table.
BLOCKING_SENTINEL = "00000000-0000-0000-0000-000000000000"

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class IdFormat(str, Enum):
    """Accepted shape of organizational identifiers.

    - ANY: any non-empty string
    - UUID: canonical 8-4-4-4-12 hex UUID
    """

    ANY = "any"
    UUID = "uuid"


class CombinationPolicy(str, Enum):
    """How a hierarchy scope combines with the project-manager permission.

    - UNION: keep the hierarchy level and carry owned projects alongside it;
      the enforcer intersects both dimensions at query time.
    - HIERARCHY_FIRST: ignore the project-manager permission whenever a
      hierarchy tag is present.
    - REJECT: refuse to resolve the combination
      (``AmbiguousRoleCombinationError``).
    """

    UNION = "union"
    HIERARCHY_FIRST = "hierarchy_first"
    REJECT = "reject"


class FilterScopeConfig(BaseModel):
    """Configuration for scope resolution and filter enforcement."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the engine",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Enforcement
    blocking_sentinel: str = Field(
        default=BLOCKING_SENTINEL,
        description="ID written into every scoped key when access is blocked",
    )
    id_format: IdFormat = Field(
        default=IdFormat.ANY,
        description="Shape every ID inside a FilterScope must have",
    )

    # Resolution
    combination_policy: CombinationPolicy = Field(
        default=CombinationPolicy.UNION,
        description="Policy for hierarchy + project-manager role combinations",
    )

    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as the root logger name",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("blocking_sentinel")
    @classmethod
    def validate_blocking_sentinel(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Blocking sentinel must be a non-empty string")
        return v

    def is_valid_id(self, value: str) -> bool:
        """Check a single identifier against ``id_format``."""
        if not isinstance(value, str) or not value:
            return False
        if self.id_format == IdFormat.UUID:
            return bool(UUID_PATTERN.match(value))
        return True

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


def load_config_from_env() -> FilterScopeConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - FILTER_BLOCKING_SENTINEL: ID used to block queries
    - FILTER_ID_FORMAT: any | uuid
    - FILTER_COMBINATION_POLICY: union | hierarchy_first | reject
    - SERVICE_NAME: Service name for logger identification

    Raises:
        ConfigurationError: If any variable holds an invalid value.
    """
    import os

    try:
        return FilterScopeConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
            blocking_sentinel=os.getenv("FILTER_BLOCKING_SENTINEL", BLOCKING_SENTINEL),
            id_format=os.getenv("FILTER_ID_FORMAT", IdFormat.ANY.value).lower(),
            combination_policy=os.getenv("FILTER_COMBINATION_POLICY", CombinationPolicy.UNION.value).lower(),
            service_name=os.getenv("SERVICE_NAME"),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid filter scope configuration: {e}", errors=e.errors()) from e


__all__ = [
    "BLOCKING_SENTINEL",
    "CombinationPolicy",
    "FilterScopeConfig",
    "IdFormat",
    "LogLevel",
    "load_config_from_env",
]
