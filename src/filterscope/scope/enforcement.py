"""Mandatory filters: second line of defense.

Rewrites caller-supplied query parameters so they cannot reach outside the
user's scope. Runs at the data-access boundary as the last transformation
before query execution, after any caller-side merging.

SECURITY: enforcement fails closed. When the context is missing, the scope
is malformed, or an unrestricted scope is claimed without the unrestricted
permission, every scoped key is set to the blocking sentinel so the query
matches no rows. Enforcement never raises.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..config import FilterScopeConfig
from ..exceptions import FilterScopeError, MissingContextError, UnauthorizedScopeClaimError
from ..logging import get_scope_logger, safe_preview
from ..permissions.constants import Permissions
from .models import (
    ORG_LEVELS,
    FilterKeys,
    FilterQueryParams,
    FilterScope,
    FilterValue,
    HierarchyContext,
    ScopeLevel,
    UserFilterContext,
)

logger = logging.getLogger(__name__)
security_logger = get_scope_logger(__name__)

INVALID_SCOPE_ID = "INVALID_SCOPE_ID"
ENFORCEMENT_FAILURE = "ENFORCEMENT_FAILURE"


def _as_ids(value: Any) -> frozenset[str]:
    """Coerce a scalar or collection filter value to a set of string IDs."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset({value}) if value else frozenset()
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(str(v) for v in value if v is not None and v != "")
    return frozenset({str(value)})


def _collapse(ids: frozenset[str]) -> FilterValue:
    """Single ID as a plain string, several as a frozenset."""
    if len(ids) == 1:
        return next(iter(ids))
    return frozenset(ids)


def _copy_params(params: Any) -> dict[str, Any]:
    if params is None:
        return {}
    try:
        return dict(params)
    except (TypeError, ValueError):
        return {}


def _blocked(params: Any, sentinel: str) -> dict[str, Any]:
    """Caller's params with every scoped key overwritten by the sentinel."""
    result = _copy_params(params)
    for key in FilterKeys.SCOPED:
        result[key] = sentinel
    return result


def _security_event(
    error: FilterScopeError,
    params: Any,
    context: Optional[UserFilterContext] = None,
) -> None:
    security_logger.error(
        "[SECURITY] %s: %s; blocking",
        error.code,
        error.message,
        context=context,
        extra={
            "security_event": error.code,
            "requested_filters": safe_preview(params),
            **error.details,
        },
    )


def _org_id_in_scope(
    level: ScopeLevel,
    entity_id: str,
    scope: FilterScope,
    hierarchy: Optional[HierarchyContext],
) -> bool:
    """Whether an org entity at ``level`` lies inside the scope's own level."""
    if entity_id in scope.ids_for_level(level):
        return True
    if hierarchy is None:
        return False
    ancestor = hierarchy.ancestor(level, entity_id, scope.level)
    return ancestor is not None and ancestor in scope.ids_for_level(scope.level)


def _employee_in_scope(employee_id: str, scope: FilterScope, hierarchy: HierarchyContext) -> bool:
    team_id = hierarchy.employee_to_team.get(employee_id)
    return team_id is not None and _org_id_in_scope(ScopeLevel.TEAM, team_id, scope, hierarchy)


def _enforce_projects_level(result: dict[str, Any], scope: FilterScope, sentinel: str) -> dict[str, Any]:
    if not scope.project_ids:
        # Owns no projects: sees nothing
        result[FilterKeys.PROJECT_ID] = sentinel
        return result

    requested = _as_ids(result.get(FilterKeys.PROJECT_ID))
    in_scope = requested & scope.project_ids
    if requested and not in_scope:
        logger.warning(
            "Requested projects outside managed set, replacing with managed projects",
            extra={"requested_projects": safe_preview(requested)},
        )
    result[FilterKeys.PROJECT_ID] = _collapse(in_scope or scope.project_ids)
    return result


def _enforce_org_level(
    result: dict[str, Any],
    scope: FilterScope,
    hierarchy: Optional[HierarchyContext],
    sentinel: str,
) -> dict[str, Any]:
    index = ORG_LEVELS.index(scope.level)
    forced_key = FilterKeys.BY_LEVEL[scope.level]
    forced_ids = scope.ids_for_level(scope.level)

    # Overwrite, never merge with what the caller asked for
    result[forced_key] = _collapse(forced_ids) if forced_ids else sentinel

    for ancestor in ORG_LEVELS[:index]:
        result.pop(FilterKeys.BY_LEVEL[ancestor], None)

    # Narrower keys survive only for IDs proven to sit inside scope
    for narrower in ORG_LEVELS[index + 1 :]:
        key = FilterKeys.BY_LEVEL[narrower]
        if key not in result:
            continue
        kept = frozenset(i for i in _as_ids(result[key]) if _org_id_in_scope(narrower, i, scope, hierarchy))
        if kept:
            result[key] = _collapse(kept)
        else:
            del result[key]

    if hierarchy is not None and FilterKeys.RESPONSIBLE_ID in result:
        employees = frozenset(
            e for e in _as_ids(result[FilterKeys.RESPONSIBLE_ID]) if _employee_in_scope(e, scope, hierarchy)
        )
        if employees:
            result[FilterKeys.RESPONSIBLE_ID] = _collapse(employees)
        else:
            del result[FilterKeys.RESPONSIBLE_ID]

    # Role combination: org key bounds the query, project filter only narrows it
    if scope.project_ids and FilterKeys.PROJECT_ID in result:
        projects = _as_ids(result[FilterKeys.PROJECT_ID]) & scope.project_ids
        if projects:
            result[FilterKeys.PROJECT_ID] = _collapse(projects)
        else:
            logger.warning("Project filter outside managed projects removed; org filter applies")
            del result[FilterKeys.PROJECT_ID]

    return result


def _enforce(
    params: FilterQueryParams,
    context: Optional[UserFilterContext],
    hierarchy: Optional[HierarchyContext],
    config: FilterScopeConfig,
) -> dict[str, Any]:
    sentinel = config.blocking_sentinel

    if context is None:
        _security_event(MissingContextError("filter context is missing"), params)
        return _blocked(params, sentinel)

    scope = context.scope
    if scope is None:
        _security_event(MissingContextError("filter scope is missing"), params, context)
        return _blocked(params, sentinel)

    invalid = sorted(i for i in scope.all_ids() if not config.is_valid_id(i))
    if invalid and not scope.is_unrestricted:
        _security_event(
            FilterScopeError("scope contains malformed IDs", code=INVALID_SCOPE_ID, invalid_ids=invalid),
            params,
            context,
        )
        return _blocked(params, sentinel)

    if scope.level == ScopeLevel.ALL:
        # Never trust level=all alone as proof of admin rights
        if not context.has_filter_permission(Permissions.FILTERS_SCOPE_ALL):
            _security_event(
                UnauthorizedScopeClaimError(filter_permissions=sorted(context.filter_permissions)),
                params,
                context,
            )
            return _blocked(params, sentinel)
        return _copy_params(params)

    result = _copy_params(params)

    if scope.level == ScopeLevel.PROJECTS:
        return _enforce_projects_level(result, scope, sentinel)

    return _enforce_org_level(result, scope, hierarchy, sentinel)


def apply_mandatory_filters(
    params: FilterQueryParams,
    context: Optional[UserFilterContext],
    *,
    hierarchy: Optional[HierarchyContext] = None,
    config: Optional[FilterScopeConfig] = None,
) -> dict[str, Any]:
    """Force the user's scope onto caller-supplied query parameters.

    Returns a new mapping; ``params`` is never mutated. Single IDs come
    back as ``str``, several as ``frozenset[str]``.

    Rules by scope level:

    - missing context/scope → every scoped key set to the blocking sentinel
    - ``all`` → unchanged, but only with the ``filters.scope.all`` permission;
      otherwise blocked
    - ``subdivision``/``department``/``team`` → the level's key is overwritten
      with the scope's IDs, ancestor keys are deleted, narrower keys are kept
      only for IDs that ``hierarchy`` places inside scope
    - ``projects`` → requested projects outside the managed set are replaced
      by the full managed set; no managed projects → blocked

    Args:
        params: Filters requested by the caller.
        context: The user's filter context (None fails closed).
        hierarchy: Optional org tree links for validating narrower filters.
        config: Engine configuration (blocking sentinel, ID format).

    Returns:
        Enforced query parameters.

    Example::

        ctx = UserFilterContext(scope=FilterScope(level="department", department_ids={"D1"}))
        apply_mandatory_filters({"team_id": "T9", "department_id": "D2"}, ctx)
        # {"department_id": "D1"}
    """
    config = config or FilterScopeConfig()
    try:
        return _enforce(params, context, hierarchy, config)
    except Exception as e:
        logger.exception("Mandatory filter enforcement failed")
        try:
            _security_event(
                FilterScopeError(f"enforcement failed: {type(e).__name__}", code=ENFORCEMENT_FAILURE),
                params,
            )
        except Exception:
            logger.exception("Failed to record enforcement failure")
        return _blocked(params, config.blocking_sentinel)


def validate_filter_for_scope(
    filter_key: str,
    filter_value: Any,
    scope: Optional[FilterScope],
    *,
    hierarchy: Optional[HierarchyContext] = None,
) -> bool:
    """Check whether a single caller filter already lies within scope.

    Org filters below the scope's level need ``hierarchy`` to be proven;
    without it they are reported as out of scope. Keys the engine does not
    control (responsible, label) are always valid.
    """
    if scope is None:
        return False
    if scope.level == ScopeLevel.ALL:
        return True

    values = _as_ids(filter_value)
    if not values:
        return True

    key_levels = {FilterKeys.BY_LEVEL[level]: level for level in ORG_LEVELS}

    if filter_key in key_levels:
        level = key_levels[filter_key]
        if scope.level not in ORG_LEVELS or ORG_LEVELS.index(level) < ORG_LEVELS.index(scope.level):
            return False
        return all(_org_id_in_scope(level, v, scope, hierarchy) for v in values)

    if filter_key == FilterKeys.PROJECT_ID:
        if scope.project_ids:
            return values <= scope.project_ids
        return scope.level != ScopeLevel.PROJECTS

    return True


__all__ = [
    "apply_mandatory_filters",
    "validate_filter_for_scope",
]
