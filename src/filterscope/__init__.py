from .config import BLOCKING_SENTINEL, CombinationPolicy, FilterScopeConfig, IdFormat, LogLevel, load_config_from_env
from .exceptions import (
    AmbiguousRoleCombinationError,
    ConfigurationError,
    FilterScopeError,
    IncompleteProfileError,
    InvalidPermissionError,
    MissingContextError,
    MissingHierarchyError,
    UnauthorizedScopeClaimError,
)
from .logging import (
    ScopeLogFormatter,
    ScopeLoggerAdapter,
    get_scope_logger,
    safe_preview,
    setup_logging,
)
from .permissions import (
    HierarchyLevel,
    Permissions,
    ROLE_PROFILES,
    effective_hierarchy_level,
    expand_filter_permissions,
    is_system_permission,
    is_valid_permission,
    normalize_permissions,
    parse_permission,
    role_permissions,
)
from .scope import (
    DisplayNames,
    FilterKeys,
    FilterOption,
    FilterScope,
    HierarchyContext,
    LockedFilter,
    OptionKey,
    OrgProfile,
    ScopeLevel,
    UserFilterContext,
    apply_mandatory_filters,
    build_filter_context,
    filter_options,
    get_locked_filters,
    resolve_filter_scope,
    validate_filter_for_scope,
)

__all__ = [
    'BLOCKING_SENTINEL',
    'CombinationPolicy',
    'FilterScopeConfig',
    'IdFormat',
    'LogLevel',
    'load_config_from_env',
    'AmbiguousRoleCombinationError',
    'ConfigurationError',
    'FilterScopeError',
    'IncompleteProfileError',
    'InvalidPermissionError',
    'MissingContextError',
    'MissingHierarchyError',
    'UnauthorizedScopeClaimError',
    'ScopeLogFormatter',
    'ScopeLoggerAdapter',
    'get_scope_logger',
    'safe_preview',
    'setup_logging',
    'HierarchyLevel',
    'Permissions',
    'ROLE_PROFILES',
    'effective_hierarchy_level',
    'expand_filter_permissions',
    'is_system_permission',
    'is_valid_permission',
    'normalize_permissions',
    'parse_permission',
    'role_permissions',
    'DisplayNames',
    'FilterKeys',
    'FilterOption',
    'FilterScope',
    'HierarchyContext',
    'LockedFilter',
    'OptionKey',
    'OrgProfile',
    'ScopeLevel',
    'UserFilterContext',
    'apply_mandatory_filters',
    'build_filter_context',
    'filter_options',
    'get_locked_filters',
    'resolve_filter_scope',
    'validate_filter_for_scope',
]
