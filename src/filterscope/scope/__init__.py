"""Scope resolution, option filtering, mandatory filters and locked-filter badges.

Flow:
    permissions ─► resolve_filter_scope() ─► FilterScope
                                              ├─► filter_options()          (UI lists)
                                              ├─► apply_mandatory_filters() (data access)
                                              └─► get_locked_filters()      (UI badges)
"""

from .enforcement import apply_mandatory_filters, validate_filter_for_scope
from .locked import get_locked_filters
from .models import (
    ORG_LEVELS,
    DisplayNames,
    FilterKeys,
    FilterOption,
    FilterQueryParams,
    FilterScope,
    HierarchyContext,
    LockedFilter,
    OptionKey,
    OrgProfile,
    ScopeLevel,
    UserFilterContext,
)
from .options import AllowedIds, build_allowed_ids, filter_options, is_option_allowed
from .resolver import (
    PROJECT_MANAGER_PERMISSIONS,
    build_filter_context,
    has_project_manager_permission,
    resolve_filter_scope,
)

__all__ = [
    "ORG_LEVELS",
    "PROJECT_MANAGER_PERMISSIONS",
    "AllowedIds",
    "DisplayNames",
    "FilterKeys",
    "FilterOption",
    "FilterQueryParams",
    "FilterScope",
    "HierarchyContext",
    "LockedFilter",
    "OptionKey",
    "OrgProfile",
    "ScopeLevel",
    "UserFilterContext",
    "apply_mandatory_filters",
    "build_allowed_ids",
    "build_filter_context",
    "filter_options",
    "get_locked_filters",
    "has_project_manager_permission",
    "is_option_allowed",
    "resolve_filter_scope",
    "validate_filter_for_scope",
]
