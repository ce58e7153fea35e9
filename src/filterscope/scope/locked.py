"""Locked-filter descriptor for UI badges. Display only, never enforcement."""

from __future__ import annotations

from typing import Optional

from .models import LockedFilter, ScopeLevel, UserFilterContext


def get_locked_filters(context: Optional[UserFilterContext]) -> list[LockedFilter]:
    """List the filter dimensions forced by the user's scope.

    One entry per forced dimension, named from ``context.display_names``.
    Several managed projects collapse into a single ``projects`` entry
    showing their count. Dimensions without a known name are skipped.
    """
    if context is None or context.scope is None:
        return []

    scope = context.scope
    names = context.display_names
    locked: list[LockedFilter] = []

    if scope.level == ScopeLevel.SUBDIVISION and names.subdivision:
        locked.append(LockedFilter(key="subdivision", display_name=names.subdivision))

    elif scope.level == ScopeLevel.DEPARTMENT and names.department:
        locked.append(LockedFilter(key="department", display_name=names.department))

    elif scope.level == ScopeLevel.TEAM and names.team:
        locked.append(LockedFilter(key="team", display_name=names.team))

    elif scope.level == ScopeLevel.PROJECTS:
        count = len(names.projects) or len(scope.project_ids)
        if count == 1 and names.projects:
            locked.append(LockedFilter(key="project", display_name=names.projects[0]))
        elif count > 1:
            locked.append(LockedFilter(key="projects", display_name=f"{count} projects"))

    return locked


__all__ = ["get_locked_filters"]
