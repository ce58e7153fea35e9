"""Core data models for scope resolution and filter enforcement.

Value types (FilterScope, UserFilterContext, OrgProfile) are frozen
dataclasses: they are computed once per session and cached by the caller.
FilterOption is a Pydantic model because the catalog arrives from an
external directory and is validated on the way in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ScopeLevel(str, Enum):
    """Breadth of what a user may see."""

    ALL = "all"
    SUBDIVISION = "subdivision"
    DEPARTMENT = "department"
    TEAM = "team"
    PROJECTS = "projects"


# Org levels, broadest first
ORG_LEVELS: tuple[ScopeLevel, ...] = (ScopeLevel.SUBDIVISION, ScopeLevel.DEPARTMENT, ScopeLevel.TEAM)


class FilterKeys:
    """Query parameter names understood by the data-access layer."""

    SUBDIVISION_ID = "subdivision_id"
    DEPARTMENT_ID = "department_id"
    TEAM_ID = "team_id"
    PROJECT_ID = "project_id"
    RESPONSIBLE_ID = "responsible_id"
    LABEL_ID = "label_id"

    # Keys the enforcer controls; everything else passes through
    SCOPED = ("subdivision_id", "department_id", "team_id", "project_id")

    BY_LEVEL = {
        ScopeLevel.SUBDIVISION: "subdivision_id",
        ScopeLevel.DEPARTMENT: "department_id",
        ScopeLevel.TEAM: "team_id",
        ScopeLevel.PROJECTS: "project_id",
    }


class OptionKey(str, Enum):
    """Kind of a selectable catalog entry."""

    SUBDIVISION = "subdivision"
    DEPARTMENT = "department"
    TEAM = "team"
    EMPLOYEE = "employee"
    PROJECT = "project"
    LABEL = "label"


FilterValue = Union[str, frozenset]
FilterQueryParams = Mapping[str, Any]


def _id_set(values: Iterable[str] | str | None) -> frozenset[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        return frozenset({values})
    return frozenset(values)


# Org ID sets a scope level may not carry
_FORBIDDEN_SETS: dict[ScopeLevel, tuple[str, ...]] = {
    ScopeLevel.ALL: (),
    ScopeLevel.SUBDIVISION: ("department_ids", "team_ids"),
    ScopeLevel.DEPARTMENT: ("team_ids",),
    ScopeLevel.TEAM: ("subdivision_ids",),
    ScopeLevel.PROJECTS: ("subdivision_ids", "department_ids", "team_ids"),
}


@dataclass(frozen=True)
class FilterScope:
    """The maximal set of org entities a user may access.

    ``level=all`` ignores every ID set. Other levels carry the IDs of their
    own level (and, for team, the owning department). ``project_ids`` may
    accompany any org level when the user also manages projects.

    Raises:
        ValueError: If an ID set is populated that the level may not carry.
    """

    level: ScopeLevel
    subdivision_ids: frozenset[str] = frozenset()
    department_ids: frozenset[str] = frozenset()
    team_ids: frozenset[str] = frozenset()
    project_ids: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", ScopeLevel(self.level))
        for name in ("subdivision_ids", "department_ids", "team_ids", "project_ids"):
            object.__setattr__(self, name, _id_set(getattr(self, name)))

        for name in _FORBIDDEN_SETS[self.level]:
            if getattr(self, name):
                raise ValueError(f"Scope level '{self.level.value}' cannot carry {name}")

    @classmethod
    def unrestricted(cls) -> "FilterScope":
        return cls(level=ScopeLevel.ALL)

    @property
    def is_unrestricted(self) -> bool:
        return self.level == ScopeLevel.ALL

    def ids_for_level(self, level: ScopeLevel) -> frozenset[str]:
        """ID set matching a level (``projects`` → ``project_ids``)."""
        if level == ScopeLevel.SUBDIVISION:
            return self.subdivision_ids
        if level == ScopeLevel.DEPARTMENT:
            return self.department_ids
        if level == ScopeLevel.TEAM:
            return self.team_ids
        if level == ScopeLevel.PROJECTS:
            return self.project_ids
        return frozenset()

    def all_ids(self) -> frozenset[str]:
        return self.subdivision_ids | self.department_ids | self.team_ids | self.project_ids


@dataclass(frozen=True)
class OrgProfile:
    """The user's own organizational identifiers, from the profile store."""

    subdivision_id: Optional[str] = None
    department_id: Optional[str] = None
    team_id: Optional[str] = None
    owned_project_ids: frozenset[str] = frozenset()

    subdivision_name: Optional[str] = None
    department_name: Optional[str] = None
    team_name: Optional[str] = None
    owned_project_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "owned_project_ids", _id_set(self.owned_project_ids))
        object.__setattr__(self, "owned_project_names", tuple(self.owned_project_names))


@dataclass(frozen=True)
class DisplayNames:
    """Human-readable names of the forced filter dimensions."""

    subdivision: Optional[str] = None
    department: Optional[str] = None
    team: Optional[str] = None
    projects: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "projects", tuple(self.projects))


@dataclass(frozen=True)
class UserFilterContext:
    """Immutable per-session snapshot of a user's filter permissions.

    Safe to cache until the user's role or org assignment changes; then
    rebuild it wholesale with ``build_filter_context()``.
    """

    scope: Optional[FilterScope]
    display_names: DisplayNames = field(default_factory=DisplayNames)
    filter_permissions: frozenset[str] = frozenset()
    user_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "filter_permissions", frozenset(self.filter_permissions))

    def has_filter_permission(self, permission: str) -> bool:
        return permission in self.filter_permissions


class FilterOption(BaseModel):
    """Selectable catalog entry for UI filter widgets.

    Relationships are expressed only through ``parent_id``:
    department → subdivision, team → department, employee → team.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    key: OptionKey
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    display_name: str = Field(default="", alias="displayName")


@dataclass(frozen=True)
class LockedFilter:
    """A filter dimension forced by scope, for badges and tooltips only."""

    key: str
    display_name: str


@dataclass(frozen=True)
class HierarchyContext:
    """Child → parent maps of the org tree.

    Lets the enforcer prove that a caller-supplied narrower filter (a team
    inside a department head's department) lies within scope.
    """

    department_to_subdivision: Mapping[str, str] = field(default_factory=dict)
    team_to_department: Mapping[str, str] = field(default_factory=dict)
    employee_to_team: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_options(cls, options: Iterable[FilterOption]) -> "HierarchyContext":
        """Build the maps from a catalog's ``parent_id`` links."""
        department_to_subdivision: dict[str, str] = {}
        team_to_department: dict[str, str] = {}
        employee_to_team: dict[str, str] = {}

        for option in options:
            if not option.parent_id:
                continue
            if option.key == OptionKey.DEPARTMENT:
                department_to_subdivision[option.id] = option.parent_id
            elif option.key == OptionKey.TEAM:
                team_to_department[option.id] = option.parent_id
            elif option.key == OptionKey.EMPLOYEE:
                employee_to_team[option.id] = option.parent_id

        return cls(
            department_to_subdivision=department_to_subdivision,
            team_to_department=team_to_department,
            employee_to_team=employee_to_team,
        )

    def ancestor(self, level: ScopeLevel, entity_id: str, target: ScopeLevel) -> Optional[str]:
        """Walk up from ``entity_id`` (of ``level``) to the ID at ``target``.

        Returns None when a link is missing or ``target`` is not above ``level``.
        """
        if level not in ORG_LEVELS or target not in ORG_LEVELS:
            return None
        if ORG_LEVELS.index(target) > ORG_LEVELS.index(level):
            return None

        current: Optional[str] = entity_id
        step = level
        while step != target and current is not None:
            if step == ScopeLevel.TEAM:
                current = self.team_to_department.get(current)
                step = ScopeLevel.DEPARTMENT
            else:
                current = self.department_to_subdivision.get(current)
                step = ScopeLevel.SUBDIVISION
        return current


__all__ = [
    "ORG_LEVELS",
    "DisplayNames",
    "FilterKeys",
    "FilterOption",
    "FilterQueryParams",
    "FilterScope",
    "FilterValue",
    "HierarchyContext",
    "LockedFilter",
    "OptionKey",
    "OrgProfile",
    "ScopeLevel",
]
