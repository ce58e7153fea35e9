"""Tests for permission constants, normalization and inheritance."""

from __future__ import annotations

import itertools

import pytest

from filterscope import (
    ROLE_PROFILES,
    HierarchyLevel,
    InvalidPermissionError,
    Permissions,
    effective_hierarchy_level,
    expand_filter_permissions,
    is_system_permission,
    is_valid_permission,
    normalize_permissions,
    parse_permission,
    role_permissions,
)
from filterscope.permissions import HIERARCHY_PRIORITY, HIERARCHY_TAGS, group_permissions_by_module


class TestPermissions:
    """Tests for Permissions constants."""

    def test_permission_format(self) -> None:
        """All string-constant permissions follow module.action[.scope] format."""
        for attr in dir(Permissions):
            if attr.startswith("_"):
                continue
            value = getattr(Permissions, attr)
            if not isinstance(value, str):
                continue  # Skip builders and tag groups
            assert is_valid_permission(value), f"{attr}={value} is malformed"

    def test_unique_permissions(self) -> None:
        """All permission values are unique."""
        values = [
            getattr(Permissions, attr)
            for attr in dir(Permissions)
            if not attr.startswith("_") and isinstance(getattr(Permissions, attr), str)
        ]
        assert len(values) == len(set(values)), "Duplicate permission values found"

    def test_build(self) -> None:
        assert Permissions.build("projects", "view", "managed") == Permissions.PROJECTS_VIEW_MANAGED
        assert Permissions.build("calendar", "view") == Permissions.CALENDAR_VIEW


class TestHierarchyLevel:
    """Tests for the role ladder."""

    def test_priority_order(self) -> None:
        """Admin outranks everyone, user is lowest."""
        assert HIERARCHY_PRIORITY[0] == HierarchyLevel.ADMIN
        assert HIERARCHY_PRIORITY[-1] == HierarchyLevel.USER
        assert HierarchyLevel.SUBDIVISION_HEAD.priority < HierarchyLevel.DEPARTMENT_HEAD.priority
        assert HierarchyLevel.DEPARTMENT_HEAD.priority < HierarchyLevel.TEAM_LEAD.priority

    def test_tags_match_constants(self) -> None:
        assert HierarchyLevel.ADMIN.tag == Permissions.IS_ADMIN
        assert HierarchyLevel.TEAM_LEAD.tag == Permissions.IS_TEAM_LEAD
        assert HierarchyLevel.from_tag(Permissions.IS_DEPARTMENT_HEAD) == HierarchyLevel.DEPARTMENT_HEAD
        assert HierarchyLevel.from_tag("calendar.view") is None

    def test_project_manager_is_not_on_the_ladder(self) -> None:
        assert Permissions.IS_PROJECT_MANAGER not in HIERARCHY_TAGS


class TestNormalizePermissions:
    """Tests for hierarchy normalization."""

    def test_team_lead_and_user(self) -> None:
        """{team_lead, user} normalizes to team_lead only."""
        result = normalize_permissions({Permissions.IS_TEAM_LEAD, Permissions.IS_USER})
        assert result == frozenset({Permissions.IS_TEAM_LEAD})

    def test_admin_wins(self) -> None:
        result = normalize_permissions(
            [Permissions.IS_USER, Permissions.IS_ADMIN, Permissions.IS_DEPARTMENT_HEAD, Permissions.CALENDAR_VIEW]
        )
        assert result == frozenset({Permissions.IS_ADMIN, Permissions.CALENDAR_VIEW})

    def test_non_hierarchy_tags_untouched(self) -> None:
        perms = {
            Permissions.IS_SUBDIVISION_HEAD,
            Permissions.IS_TEAM_LEAD,
            Permissions.PROJECTS_VIEW_MANAGED,
            Permissions.IS_PROJECT_MANAGER,
            "custom.thing.own",
        }
        result = normalize_permissions(perms)
        assert Permissions.PROJECTS_VIEW_MANAGED in result
        assert Permissions.IS_PROJECT_MANAGER in result
        assert "custom.thing.own" in result
        assert Permissions.IS_TEAM_LEAD not in result

    def test_no_hierarchy_tag_passes_through(self) -> None:
        perms = frozenset({Permissions.CALENDAR_VIEW, Permissions.PROJECTS_VIEW_ALL})
        assert normalize_permissions(perms) == perms

    def test_empty_input(self) -> None:
        assert normalize_permissions(()) == frozenset()

    def test_idempotent(self) -> None:
        """normalize(normalize(S)) == normalize(S)."""
        perms = set(HIERARCHY_TAGS) | {Permissions.CALENDAR_VIEW}
        once = normalize_permissions(perms)
        assert normalize_permissions(once) == once

    def test_order_independent(self) -> None:
        """Every permutation of the input yields the same result."""
        perms = [Permissions.IS_USER, Permissions.IS_TEAM_LEAD, Permissions.IS_DEPARTMENT_HEAD, Permissions.CALENDAR_VIEW]
        results = {normalize_permissions(p) for p in itertools.permutations(perms)}
        assert len(results) == 1

    @pytest.mark.parametrize("size", range(1, len(HIERARCHY_TAGS) + 1))
    def test_at_most_one_hierarchy_tag(self, size: int) -> None:
        """Any combination of hierarchy tags keeps exactly the highest one."""
        for combo in itertools.combinations(sorted(HIERARCHY_TAGS), size):
            result = normalize_permissions(combo)
            kept = result & HIERARCHY_TAGS
            assert len(kept) == 1
            expected = next(level.tag for level in HIERARCHY_PRIORITY if level.tag in combo)
            assert kept == {expected}


class TestEffectiveHierarchyLevel:
    def test_highest_level(self) -> None:
        perms = {Permissions.IS_USER, Permissions.IS_DEPARTMENT_HEAD}
        assert effective_hierarchy_level(perms) == HierarchyLevel.DEPARTMENT_HEAD

    def test_none_without_hierarchy(self) -> None:
        assert effective_hierarchy_level({Permissions.IS_PROJECT_MANAGER}) is None


class TestPermissionParsing:
    """Tests for parse_permission and structure checks."""

    def test_parse_with_scope(self) -> None:
        parts = parse_permission("projects.view.managed")
        assert parts.module == "projects"
        assert parts.action == "view"
        assert parts.scope == "managed"

    def test_parse_without_scope(self) -> None:
        parts = parse_permission("calendar.view")
        assert parts.scope is None

    def test_parse_invalid(self) -> None:
        with pytest.raises(InvalidPermissionError) as exc_info:
            parse_permission("projects")
        assert exc_info.value.code == "INVALID_PERMISSION"
        assert exc_info.value.details["permission"] == "projects"

    def test_invalid_permission_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_permission(".view")

    @pytest.mark.parametrize(
        ("permission", "valid"),
        [
            ("calendar.view", True),
            ("projects.view.managed", True),
            ("projects", False),
            ("a.b.c.d", False),
            ("projects..managed", False),
            ("", False),
        ],
    )
    def test_is_valid_permission(self, permission: str, valid: bool) -> None:
        assert is_valid_permission(permission) is valid

    def test_is_system_permission(self) -> None:
        assert is_system_permission(Permissions.IS_ADMIN)
        assert is_system_permission("system.maintenance")
        assert not is_system_permission(Permissions.CALENDAR_VIEW)

    def test_group_by_module(self) -> None:
        groups = group_permissions_by_module(
            ["projects.view.managed", "projects.edit_all", "calendar.view", "broken"]
        )
        assert groups == {
            "calendar": ("calendar.view",),
            "projects": ("projects.edit_all", "projects.view.managed"),
        }


class TestExpandFilterPermissions:
    """Tests for filter-permission inheritance."""

    def test_admin_implies_scope_all(self) -> None:
        assert expand_filter_permissions((Permissions.IS_ADMIN,)) == (Permissions.FILTERS_SCOPE_ALL,)

    def test_user_implies_team(self) -> None:
        assert expand_filter_permissions((Permissions.IS_USER,)) == (Permissions.FILTERS_SCOPE_TEAM,)

    def test_explicit_grants_kept(self) -> None:
        result = expand_filter_permissions((Permissions.FILTERS_SCOPE_DEPARTMENT, Permissions.IS_PROJECT_MANAGER))
        assert result == (Permissions.FILTERS_SCOPE_DEPARTMENT, Permissions.FILTERS_SCOPE_MANAGED_PROJECTS)

    def test_only_filter_tags_returned(self) -> None:
        result = expand_filter_permissions((Permissions.CALENDAR_VIEW, Permissions.IS_TEAM_LEAD))
        assert Permissions.CALENDAR_VIEW not in result
        assert Permissions.IS_TEAM_LEAD not in result

    def test_empty_input(self) -> None:
        assert expand_filter_permissions(()) == ()


class TestRoleProfiles:
    """Tests for ROLE_PROFILES."""

    def test_every_profile_has_one_role_tag(self) -> None:
        for role, perms in ROLE_PROFILES.items():
            role_tags = (set(perms) & HIERARCHY_TAGS) | (set(perms) & {Permissions.IS_PROJECT_MANAGER})
            assert len(role_tags) == 1, f"{role} carries {role_tags}"

    def test_merge_is_not_normalized(self) -> None:
        perms = role_permissions("team_lead", "user")
        assert Permissions.IS_TEAM_LEAD in perms
        assert Permissions.IS_USER in perms
        assert normalize_permissions(perms) & HIERARCHY_TAGS == {Permissions.IS_TEAM_LEAD}

    def test_unknown_role(self) -> None:
        assert role_permissions("ghost") == frozenset()
