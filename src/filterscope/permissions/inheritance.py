"""Filter-permission inheritance and role profiles.

Provides:
- ``FILTER_PERMISSION_INHERITANCE``: hierarchy tag → implied filter-scope grants.
- ``expand_filter_permissions()``: resolve implied filter-scope grants.
- ``ROLE_PROFILES``: role name → default permission set.
"""

from __future__ import annotations

from typing import Iterable

from .constants import Permissions

# ── Filter Permission Inheritance ───────────────────────
# A hierarchy tag implies the filter-scope grant of its level.

FILTER_PERMISSION_INHERITANCE: dict[str, tuple[str, ...]] = {
    Permissions.IS_ADMIN: (Permissions.FILTERS_SCOPE_ALL,),
    Permissions.IS_SUBDIVISION_HEAD: (Permissions.FILTERS_SCOPE_SUBDIVISION,),
    Permissions.IS_DEPARTMENT_HEAD: (Permissions.FILTERS_SCOPE_DEPARTMENT,),
    Permissions.IS_TEAM_LEAD: (Permissions.FILTERS_SCOPE_TEAM,),
    Permissions.IS_USER: (Permissions.FILTERS_SCOPE_TEAM,),
    Permissions.IS_PROJECT_MANAGER: (Permissions.FILTERS_SCOPE_MANAGED_PROJECTS,),
}


def expand_filter_permissions(permissions: Iterable[str]) -> tuple[str, ...]:
    """Return the filter-scope grants held directly or implied by hierarchy tags.

    Only ``filters.scope.*`` tags appear in the result. Callers should pass
    a normalized set; otherwise lower roles contribute their grants too.

    Returns:
        Deduplicated, sorted tuple of filter-scope permissions.

    Example::

        >>> expand_filter_permissions(("hierarchy.is_admin", "calendar.view"))
        ('filters.scope.all',)
    """
    perms = tuple(permissions)
    expanded: set[str] = set(perms)
    queue = list(perms)

    while queue:
        perm = queue.pop()
        for child in FILTER_PERMISSION_INHERITANCE.get(perm, ()):
            if child not in expanded:
                expanded.add(child)
                queue.append(child)

    return tuple(sorted(expanded & Permissions.FILTER_SCOPE_TAGS))


# ── Role → Permission Profiles ──────────────────────────

ROLE_PROFILES: dict[str, tuple[str, ...]] = {
    "admin": (
        Permissions.IS_ADMIN,
        Permissions.USERS_VIEW_ALL,
        Permissions.USERS_EDIT_ALL,
        Permissions.PROJECTS_VIEW_ALL,
        Permissions.PROJECTS_EDIT_ALL,
        Permissions.PLANNING_VIEW_ALL,
        Permissions.PLANNING_EDIT_LOADINGS,
        Permissions.CALENDAR_VIEW,
        Permissions.ANNOUNCEMENTS_VIEW,
    ),
    "subdivision_head": (
        Permissions.IS_SUBDIVISION_HEAD,
        Permissions.USERS_VIEW_ALL,
        Permissions.PROJECTS_VIEW_ALL,
        Permissions.PLANNING_VIEW_ALL,
        Permissions.PLANNING_EDIT_LOADINGS,
        Permissions.CALENDAR_VIEW,
        Permissions.ANNOUNCEMENTS_VIEW,
    ),
    "department_head": (
        Permissions.IS_DEPARTMENT_HEAD,
        Permissions.USERS_VIEW_ALL,
        Permissions.USERS_EDIT_ALL,
        Permissions.PROJECTS_VIEW_ALL,
        Permissions.PLANNING_VIEW_ALL,
        Permissions.PLANNING_EDIT_LOADINGS,
        Permissions.CALENDAR_VIEW,
        Permissions.ANNOUNCEMENTS_VIEW,
    ),
    "project_manager": (
        Permissions.IS_PROJECT_MANAGER,
        Permissions.USERS_VIEW_ALL,
        Permissions.PROJECTS_VIEW_MANAGED,
        Permissions.PROJECTS_EDIT_ALL,
        Permissions.PLANNING_VIEW_ALL,
        Permissions.PLANNING_EDIT_LOADINGS,
        Permissions.CALENDAR_VIEW,
        Permissions.ANNOUNCEMENTS_VIEW,
    ),
    "team_lead": (
        Permissions.IS_TEAM_LEAD,
        Permissions.USERS_VIEW_ALL,
        Permissions.PROJECTS_VIEW_ALL,
        Permissions.PLANNING_VIEW_ALL,
        Permissions.PLANNING_EDIT_LOADINGS,
        Permissions.CALENDAR_VIEW,
        Permissions.ANNOUNCEMENTS_VIEW,
    ),
    "user": (
        Permissions.IS_USER,
        Permissions.USERS_VIEW_ALL,
        Permissions.PROJECTS_VIEW_ALL,
        Permissions.PLANNING_VIEW_ALL,
        Permissions.CALENDAR_VIEW,
        Permissions.ANNOUNCEMENTS_VIEW,
    ),
}


def role_permissions(*roles: str) -> frozenset[str]:
    """Merge the default permissions of several roles.

    Unknown role names contribute nothing. The result is NOT normalized;
    a user holding ``team_lead`` and ``user`` carries both hierarchy tags.
    """
    merged: set[str] = set()
    for role in roles:
        merged.update(ROLE_PROFILES.get(role, ()))
    return frozenset(merged)


__all__ = [
    "FILTER_PERMISSION_INHERITANCE",
    "ROLE_PROFILES",
    "expand_filter_permissions",
    "role_permissions",
]
