"""Exception hierarchy for the filter scope engine.

All errors inherit from FilterScopeError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for protocol mapping

Propagation rules:
    Scope resolution errors (IncompleteProfileError, MissingHierarchyError,
    AmbiguousRoleCombinationError) propagate to the caller.

    Enforcement never raises. MissingContextError and
    UnauthorizedScopeClaimError name the reason a query was blocked; the
    enforcer logs their code and returns the blocking filters instead.

Usage:
    from filterscope.exceptions import FilterScopeError, IncompleteProfileError

    try:
        scope = resolve_filter_scope(permissions, profile)
    except IncompleteProfileError as e:
        show_profile_incomplete(e.message)
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "FilterScopeError",
    "ConfigurationError",
    "InvalidPermissionError",
    "IncompleteProfileError",
    "MissingHierarchyError",
    "AmbiguousRoleCombinationError",
    "MissingContextError",
    "UnauthorizedScopeClaimError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class FilterScopeError(Exception):
    """Base exception for the filter scope engine.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "INCOMPLETE_PROFILE").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(FilterScopeError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class InvalidPermissionError(FilterScopeError, ValueError):
    """Permission tag is not in ``module.action[.scope]`` form."""

    code: str = "INVALID_PERMISSION"
    message: str = "Invalid permission format"


class IncompleteProfileError(FilterScopeError):
    """A claimed hierarchy level requires an org identifier the profile lacks."""

    code: str = "INCOMPLETE_PROFILE"
    message: str = "User profile is incomplete for the claimed role"


class MissingHierarchyError(IncompleteProfileError):
    """No hierarchy tag and no project-manager permission in the permission set."""

    code: str = "MISSING_HIERARCHY"
    message: str = "No hierarchy role assigned to the user"


class AmbiguousRoleCombinationError(FilterScopeError):
    """Hierarchy and project-manager claims co-occur under the ``reject`` policy."""

    code: str = "AMBIGUOUS_ROLE_COMBINATION"
    message: str = "Hierarchy role and project-manager role cannot be combined"


class MissingContextError(FilterScopeError):
    """No filter context or scope was available at enforcement time."""

    code: str = "MISSING_CONTEXT"
    message: str = "Filter context is missing"


class UnauthorizedScopeClaimError(FilterScopeError):
    """Unrestricted scope claimed without the unrestricted permission."""

    code: str = "UNAUTHORIZED_SCOPE_CLAIM"
    message: str = "Unrestricted scope claimed without permission"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[FilterScopeError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[FilterScopeError]] = {}

    def register(self, code: str, error_cls: type[FilterScopeError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[FilterScopeError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[FilterScopeError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR")
        class MyCustomError(FilterScopeError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", FilterScopeError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("INVALID_PERMISSION", InvalidPermissionError)
error_registry.register("INCOMPLETE_PROFILE", IncompleteProfileError)
error_registry.register("MISSING_HIERARCHY", MissingHierarchyError)
error_registry.register("AMBIGUOUS_ROLE_COMBINATION", AmbiguousRoleCombinationError)
error_registry.register("MISSING_CONTEXT", MissingContextError)
error_registry.register("UNAUTHORIZED_SCOPE_CLAIM", UnauthorizedScopeClaimError)
