"""Tests for the locked-filter descriptor."""

from __future__ import annotations

from filterscope import (
    DisplayNames,
    FilterScope,
    LockedFilter,
    ScopeLevel,
    UserFilterContext,
    get_locked_filters,
)


class TestGetLockedFilters:
    """Tests for get_locked_filters."""

    def test_no_context(self) -> None:
        assert get_locked_filters(None) == []

    def test_no_scope(self) -> None:
        assert get_locked_filters(UserFilterContext(scope=None)) == []

    def test_unrestricted_has_nothing_locked(self) -> None:
        context = UserFilterContext(scope=FilterScope.unrestricted(), display_names=DisplayNames(team="Bridges"))
        assert get_locked_filters(context) == []

    def test_department(self) -> None:
        context = UserFilterContext(
            scope=FilterScope(level=ScopeLevel.DEPARTMENT, department_ids={"D1"}),
            display_names=DisplayNames(department="Structures"),
        )
        assert get_locked_filters(context) == [LockedFilter(key="department", display_name="Structures")]

    def test_team(self) -> None:
        context = UserFilterContext(
            scope=FilterScope(level=ScopeLevel.TEAM, department_ids={"D1"}, team_ids={"T1"}),
            display_names=DisplayNames(department="Structures", team="Bridges"),
        )
        assert get_locked_filters(context) == [LockedFilter(key="team", display_name="Bridges")]

    def test_missing_name_is_skipped(self) -> None:
        context = UserFilterContext(scope=FilterScope(level=ScopeLevel.SUBDIVISION, subdivision_ids={"S1"}))
        assert get_locked_filters(context) == []

    def test_single_project(self) -> None:
        context = UserFilterContext(
            scope=FilterScope(level=ScopeLevel.PROJECTS, project_ids={"P1"}),
            display_names=DisplayNames(projects=("Harbor",)),
        )
        assert get_locked_filters(context) == [LockedFilter(key="project", display_name="Harbor")]

    def test_several_projects_collapse(self) -> None:
        """Managed projects collapse into one count entry."""
        context = UserFilterContext(
            scope=FilterScope(level=ScopeLevel.PROJECTS, project_ids={"P1", "P2", "P3"}),
            display_names=DisplayNames(projects=("Harbor", "Tower", "Canal")),
        )
        assert get_locked_filters(context) == [LockedFilter(key="projects", display_name="3 projects")]

    def test_project_count_without_names(self) -> None:
        context = UserFilterContext(scope=FilterScope(level=ScopeLevel.PROJECTS, project_ids={"P1", "P2"}))
        assert get_locked_filters(context) == [LockedFilter(key="projects", display_name="2 projects")]

    def test_no_projects(self) -> None:
        context = UserFilterContext(scope=FilterScope(level=ScopeLevel.PROJECTS))
        assert get_locked_filters(context) == []
