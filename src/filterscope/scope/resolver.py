"""Scope resolution: permissions + org profile → FilterScope.

Resolution fails closed. A role whose required org identifier is missing
raises IncompleteProfileError; nothing ever falls back to a broader scope.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..config import CombinationPolicy, FilterScopeConfig
from ..exceptions import AmbiguousRoleCombinationError, IncompleteProfileError, MissingHierarchyError
from ..permissions.constants import HierarchyLevel, Permissions
from ..permissions.inheritance import expand_filter_permissions
from ..permissions.normalizer import effective_hierarchy_level, normalize_permissions
from .models import DisplayNames, FilterScope, OrgProfile, ScopeLevel, UserFilterContext

logger = logging.getLogger(__name__)

# Either tag grants the orthogonal project dimension
PROJECT_MANAGER_PERMISSIONS = frozenset(
    {
        Permissions.IS_PROJECT_MANAGER,
        Permissions.FILTERS_SCOPE_MANAGED_PROJECTS,
    }
)


def has_project_manager_permission(permissions: Iterable[str]) -> bool:
    return not PROJECT_MANAGER_PERMISSIONS.isdisjoint(permissions)


def _require(profile: OrgProfile, level: HierarchyLevel, *fields: str) -> None:
    missing = [name for name in fields if not getattr(profile, name)]
    if missing:
        raise IncompleteProfileError(
            f"Role '{level.value}' requires {', '.join(missing)} in the user profile",
            hierarchy_level=level.value,
            missing=tuple(missing),
        )


def _hierarchy_scope(level: HierarchyLevel, profile: OrgProfile) -> FilterScope:
    if level == HierarchyLevel.ADMIN:
        return FilterScope.unrestricted()

    if level == HierarchyLevel.SUBDIVISION_HEAD:
        _require(profile, level, "subdivision_id")
        return FilterScope(level=ScopeLevel.SUBDIVISION, subdivision_ids=frozenset({profile.subdivision_id}))

    if level == HierarchyLevel.DEPARTMENT_HEAD:
        _require(profile, level, "department_id")
        return FilterScope(level=ScopeLevel.DEPARTMENT, department_ids=frozenset({profile.department_id}))

    if level in (HierarchyLevel.TEAM_LEAD, HierarchyLevel.USER):
        _require(profile, level, "department_id", "team_id")
        return FilterScope(
            level=ScopeLevel.TEAM,
            department_ids=frozenset({profile.department_id}),
            team_ids=frozenset({profile.team_id}),
        )

    raise IncompleteProfileError(f"Unknown hierarchy level: {level!r}")


def resolve_filter_scope(
    permissions: Iterable[str],
    profile: OrgProfile,
    *,
    policy: Optional[CombinationPolicy] = None,
    config: Optional[FilterScopeConfig] = None,
) -> FilterScope:
    """Derive the FilterScope of a user.

    Permissions are normalized first, so a raw multi-role set is accepted.

    | Hierarchy level  | Scope level | Required profile fields   |
    |------------------|-------------|---------------------------|
    | admin            | all         | none                      |
    | subdivision_head | subdivision | subdivision_id            |
    | department_head  | department  | department_id             |
    | team_lead, user  | team        | department_id, team_id    |
    | (project manager)| projects    | owned_project_ids (may be empty) |

    A project-manager permission combines with a hierarchy level according
    to ``policy`` (default: ``config.combination_policy``, itself ``union``):

    - ``union``: keep the hierarchy level, attach ``owned_project_ids``.
    - ``hierarchy_first``: drop the project dimension.
    - ``reject``: raise AmbiguousRoleCombinationError.

    Admin scope never carries project IDs.

    Args:
        permissions: Raw or normalized permission tags.
        profile: The user's org identifiers.
        policy: Combination policy override.
        config: Engine configuration.

    Returns:
        FilterScope for the user.

    Raises:
        IncompleteProfileError: The effective role needs an identifier the
            profile lacks.
        MissingHierarchyError: No hierarchy tag and no project-manager
            permission.
        AmbiguousRoleCombinationError: Hierarchy and project-manager roles
            co-occur under the ``reject`` policy.
    """
    config = config or FilterScopeConfig()
    policy = CombinationPolicy(policy or config.combination_policy)

    normalized = normalize_permissions(permissions)
    level = effective_hierarchy_level(normalized)
    manages_projects = has_project_manager_permission(normalized)

    if level is None:
        if not manages_projects:
            raise MissingHierarchyError(permissions=tuple(sorted(normalized)))
        logger.debug("Resolved projects scope (%d owned projects)", len(profile.owned_project_ids))
        return FilterScope(level=ScopeLevel.PROJECTS, project_ids=profile.owned_project_ids)

    if manages_projects and policy == CombinationPolicy.REJECT:
        raise AmbiguousRoleCombinationError(
            f"Role '{level.value}' combined with project-manager permission",
            hierarchy_level=level.value,
        )

    scope = _hierarchy_scope(level, profile)

    if manages_projects and policy == CombinationPolicy.UNION and not scope.is_unrestricted:
        scope = FilterScope(
            level=scope.level,
            subdivision_ids=scope.subdivision_ids,
            department_ids=scope.department_ids,
            team_ids=scope.team_ids,
            project_ids=profile.owned_project_ids,
        )

    logger.debug("Resolved %s scope for hierarchy level %s", scope.level.value, level.value)
    return scope


def _display_names(scope: FilterScope, profile: OrgProfile) -> DisplayNames:
    if scope.level == ScopeLevel.ALL:
        return DisplayNames()
    return DisplayNames(
        subdivision=profile.subdivision_name if scope.level == ScopeLevel.SUBDIVISION else None,
        department=profile.department_name if scope.level in (ScopeLevel.DEPARTMENT, ScopeLevel.TEAM) else None,
        team=profile.team_name if scope.level == ScopeLevel.TEAM else None,
        projects=profile.owned_project_names if scope.project_ids else (),
    )


def build_filter_context(
    permissions: Iterable[str],
    profile: OrgProfile,
    *,
    user_id: Optional[str] = None,
    policy: Optional[CombinationPolicy] = None,
    config: Optional[FilterScopeConfig] = None,
) -> UserFilterContext:
    """Resolve scope, display names and filter grants into one snapshot.

    The returned context is what callers cache per session and pass to
    ``apply_mandatory_filters()`` and ``get_locked_filters()``.

    Raises:
        Same as :func:`resolve_filter_scope`.
    """
    normalized = normalize_permissions(permissions)
    scope = resolve_filter_scope(normalized, profile, policy=policy, config=config)

    context = UserFilterContext(
        scope=scope,
        display_names=_display_names(scope, profile),
        filter_permissions=frozenset(expand_filter_permissions(normalized)),
        user_id=user_id,
    )
    logger.debug("Built filter context", extra={"user_id": user_id, "scope_level": scope.level.value})
    return context


__all__ = [
    "PROJECT_MANAGER_PERMISSIONS",
    "build_filter_context",
    "has_project_manager_permission",
    "resolve_filter_scope",
]
