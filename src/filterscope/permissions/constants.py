"""Permission constants and hierarchy levels.

Provides:
- ``Permissions``: permission string constants (``module.action[.scope]`` format).
- ``HierarchyLevel``: the ordered role ladder (admin > ... > user).
- ``HIERARCHY_PRIORITY``: hierarchy levels, highest priority first.
"""

from __future__ import annotations

from enum import Enum


class Permissions:
    """Canonical permission constants.

    Format: ``{module}.{action}[.{scope}]``

    Two groups matter to scope resolution:

    1. **Hierarchy tags** (``hierarchy.is_*``): exactly one survives
       normalization and picks the scope level.
    2. **Filter-scope tags** (``filters.scope.*``): explicit grants checked
       at enforcement time.

    Module permissions (``projects.view.managed`` etc.) pass through untouched.
    """

    # ── Hierarchy ───────────────────────────────────────
    IS_ADMIN = "hierarchy.is_admin"
    IS_SUBDIVISION_HEAD = "hierarchy.is_subdivision_head"
    IS_DEPARTMENT_HEAD = "hierarchy.is_department_head"
    IS_TEAM_LEAD = "hierarchy.is_team_lead"
    IS_USER = "hierarchy.is_user"

    # Orthogonal to the ladder, never removed by normalization
    IS_PROJECT_MANAGER = "hierarchy.is_project_manager"

    # ── Filter Scope ────────────────────────────────────
    FILTERS_SCOPE_ALL = "filters.scope.all"  # Unrestricted, checked by the enforcer
    FILTERS_SCOPE_SUBDIVISION = "filters.scope.subdivision"
    FILTERS_SCOPE_DEPARTMENT = "filters.scope.department"
    FILTERS_SCOPE_TEAM = "filters.scope.team"
    FILTERS_SCOPE_MANAGED_PROJECTS = "filters.scope.managed_projects"

    # ── Module Access ───────────────────────────────────
    USERS_VIEW_ALL = "users.view_all"
    USERS_EDIT_ALL = "users.edit_all"
    PROJECTS_VIEW_ALL = "projects.view_all"
    PROJECTS_VIEW_MANAGED = "projects.view.managed"
    PROJECTS_EDIT_ALL = "projects.edit_all"
    PLANNING_VIEW_ALL = "planning.view_all"
    PLANNING_EDIT_LOADINGS = "planning.edit_loadings"
    CALENDAR_VIEW = "calendar.view"
    ANNOUNCEMENTS_VIEW = "announcements.view"

    FILTER_SCOPE_TAGS = frozenset(
        {
            "filters.scope.all",
            "filters.scope.subdivision",
            "filters.scope.department",
            "filters.scope.team",
            "filters.scope.managed_projects",
        }
    )

    @staticmethod
    def build(module: str, action: str, scope: str | None = None) -> str:
        """Build a permission string from its parts.

        Example::

            Permissions.build("projects", "view", "managed")  # "projects.view.managed"
            Permissions.build("calendar", "view")              # "calendar.view"
        """
        if scope:
            return f"{module}.{action}.{scope}"
        return f"{module}.{action}"


class HierarchyLevel(str, Enum):
    """Role ladder. Exactly one level is effective per user."""

    ADMIN = "admin"
    SUBDIVISION_HEAD = "subdivision_head"
    DEPARTMENT_HEAD = "department_head"
    TEAM_LEAD = "team_lead"
    USER = "user"

    @property
    def tag(self) -> str:
        """Permission tag carrying this level (``hierarchy.is_<level>``)."""
        return f"hierarchy.is_{self.value}"

    @property
    def priority(self) -> int:
        """Position in the ladder; 0 is the highest."""
        return HIERARCHY_PRIORITY.index(self)

    @classmethod
    def from_tag(cls, tag: str) -> "HierarchyLevel | None":
        return _LEVEL_BY_TAG.get(tag)


# Highest priority first
HIERARCHY_PRIORITY: tuple[HierarchyLevel, ...] = (
    HierarchyLevel.ADMIN,
    HierarchyLevel.SUBDIVISION_HEAD,
    HierarchyLevel.DEPARTMENT_HEAD,
    HierarchyLevel.TEAM_LEAD,
    HierarchyLevel.USER,
)

HIERARCHY_TAGS: frozenset[str] = frozenset(level.tag for level in HIERARCHY_PRIORITY)

_LEVEL_BY_TAG: dict[str, HierarchyLevel] = {level.tag: level for level in HIERARCHY_PRIORITY}


__all__ = [
    "HIERARCHY_PRIORITY",
    "HIERARCHY_TAGS",
    "HierarchyLevel",
    "Permissions",
]
