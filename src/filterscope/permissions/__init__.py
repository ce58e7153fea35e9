"""Permission registry and hierarchy normalization.

Defines:
- Permissions: permission string constants (module.action[.scope] format)
- HierarchyLevel: the role ladder, highest priority first
- normalize_permissions(): keep only the highest hierarchy tag
- expand_filter_permissions(): resolve implied filter-scope grants
- ROLE_PROFILES: role name → default permission sets
"""

from .constants import HIERARCHY_PRIORITY, HIERARCHY_TAGS, HierarchyLevel, Permissions
from .inheritance import (
    FILTER_PERMISSION_INHERITANCE,
    ROLE_PROFILES,
    expand_filter_permissions,
    role_permissions,
)
from .normalizer import (
    PermissionParts,
    effective_hierarchy_level,
    group_permissions_by_module,
    hierarchy_tags,
    is_system_permission,
    is_valid_permission,
    normalize_permissions,
    parse_permission,
)

__all__ = [
    "FILTER_PERMISSION_INHERITANCE",
    "HIERARCHY_PRIORITY",
    "HIERARCHY_TAGS",
    "ROLE_PROFILES",
    "HierarchyLevel",
    "PermissionParts",
    "Permissions",
    "effective_hierarchy_level",
    "expand_filter_permissions",
    "group_permissions_by_module",
    "hierarchy_tags",
    "is_system_permission",
    "is_valid_permission",
    "normalize_permissions",
    "parse_permission",
    "role_permissions",
]
