"""Option filtering: first line of defense.

Trims a filter-widget catalog down to the entries a user may pick. This is
a UI convenience only; the data-access boundary is guarded separately by
``apply_mandatory_filters()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .models import FilterOption, FilterScope, OptionKey, ScopeLevel


@dataclass(frozen=True)
class AllowedIds:
    """IDs visible under a scope, per org level, after cascading."""

    subdivisions: frozenset[str]
    departments: frozenset[str]
    teams: frozenset[str]
    employees: frozenset[str]


def _children(options: Iterable[FilterOption], key: OptionKey, parents: set[str]) -> set[str]:
    return {option.id for option in options if option.key == key and option.parent_id and option.parent_id in parents}


def build_allowed_ids(options: list[FilterOption], scope: FilterScope) -> AllowedIds:
    """Cascade the scope's IDs down the catalog through ``parent_id`` links.

    1. Seed from the scope's subdivision, department and team IDs.
    2. Subdivision scope: add departments under allowed subdivisions.
    3. Subdivision or department scope: add teams under allowed departments.
    4. Any scope but projects: add employees under allowed teams.
    """
    subdivisions = set(scope.subdivision_ids)
    departments = set(scope.department_ids)
    teams = set(scope.team_ids)
    employees: set[str] = set()

    if scope.level == ScopeLevel.SUBDIVISION and subdivisions:
        departments |= _children(options, OptionKey.DEPARTMENT, subdivisions)

    if scope.level in (ScopeLevel.SUBDIVISION, ScopeLevel.DEPARTMENT) and departments:
        teams |= _children(options, OptionKey.TEAM, departments)

    if scope.level != ScopeLevel.PROJECTS and teams:
        employees = _children(options, OptionKey.EMPLOYEE, teams)

    return AllowedIds(
        subdivisions=frozenset(subdivisions),
        departments=frozenset(departments),
        teams=frozenset(teams),
        employees=frozenset(employees),
    )


def is_option_allowed(option: FilterOption, scope: FilterScope, allowed: AllowedIds) -> bool:
    """Visibility of one catalog entry under a non-``all`` scope.

    An org entry is shown only at or below the scope's own level and only
    when its ID is in the matching allowed set.
    """
    level = scope.level

    if option.key == OptionKey.SUBDIVISION:
        return level == ScopeLevel.SUBDIVISION and option.id in allowed.subdivisions

    if option.key == OptionKey.DEPARTMENT:
        return level in (ScopeLevel.SUBDIVISION, ScopeLevel.DEPARTMENT) and option.id in allowed.departments

    if option.key == OptionKey.TEAM:
        return (
            level in (ScopeLevel.SUBDIVISION, ScopeLevel.DEPARTMENT, ScopeLevel.TEAM) and option.id in allowed.teams
        )

    if option.key == OptionKey.EMPLOYEE:
        # Project managers see everyone here; the server restricts by project
        if level == ScopeLevel.PROJECTS:
            return True
        return option.id in allowed.employees

    if option.key == OptionKey.PROJECT:
        if scope.project_ids:
            return option.id in scope.project_ids
        return True

    return option.key == OptionKey.LABEL


def filter_options(options: Iterable[FilterOption], scope: Optional[FilterScope]) -> list[FilterOption]:
    """Return the catalog entries visible under ``scope``, in catalog order.

    No scope shows nothing. ``level=all`` shows everything.

    Example::

        scope = FilterScope(level=ScopeLevel.SUBDIVISION, subdivision_ids={"Sub1"})
        filter_options(catalog, scope)
        # → Sub1, its departments, their teams, their employees, all projects, all labels
    """
    catalog = list(options)

    if scope is None:
        return []

    if scope.level == ScopeLevel.ALL:
        return catalog

    allowed = build_allowed_ids(catalog, scope)
    return [option for option in catalog if is_option_allowed(option, scope, allowed)]


__all__ = [
    "AllowedIds",
    "build_allowed_ids",
    "filter_options",
    "is_option_allowed",
]
