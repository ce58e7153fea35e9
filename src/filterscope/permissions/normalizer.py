"""Permission normalization and parsing.

A user may hold several roles at once, so several ``hierarchy.is_*`` tags
can arrive together. Normalization keeps only the highest one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ..exceptions import InvalidPermissionError
from .constants import HIERARCHY_PRIORITY, HIERARCHY_TAGS, HierarchyLevel

logger = logging.getLogger(__name__)


def normalize_permissions(permissions: Iterable[str]) -> frozenset[str]:
    """Collapse hierarchy tags down to the single highest-priority one.

    Scans the ladder from ``admin`` down; on the first tag present, every
    lower hierarchy tag is removed. Non-hierarchy tags are never touched.
    A set without hierarchy tags is returned unchanged.

    Idempotent and independent of input order.

    Example::

        >>> normalize_permissions({"hierarchy.is_team_lead", "hierarchy.is_user", "calendar.view"})
        frozenset({'hierarchy.is_team_lead', 'calendar.view'})
    """
    perm_set = frozenset(permissions)

    for index, level in enumerate(HIERARCHY_PRIORITY):
        if level.tag in perm_set:
            lower = {lower_level.tag for lower_level in HIERARCHY_PRIORITY[index + 1 :]}
            return perm_set - lower

    return perm_set


def effective_hierarchy_level(permissions: Iterable[str]) -> HierarchyLevel | None:
    """Return the highest hierarchy level present, or None."""
    perm_set = frozenset(permissions)
    for level in HIERARCHY_PRIORITY:
        if level.tag in perm_set:
            return level
    return None


def hierarchy_tags(permissions: Iterable[str]) -> frozenset[str]:
    """Return only the ``hierarchy.is_*`` ladder tags of a permission set."""
    return frozenset(permissions) & HIERARCHY_TAGS


# ── Parsing ────────────────────────────────────────────


@dataclass(frozen=True)
class PermissionParts:
    """A permission tag split into ``module.action[.scope]``."""

    module: str
    action: str
    scope: str | None = None


def parse_permission(permission: str) -> PermissionParts:
    """Split a permission tag into its parts.

    Raises:
        InvalidPermissionError: Fewer than two dot-separated parts.

    Example::

        >>> parse_permission("projects.view.managed")
        PermissionParts(module='projects', action='view', scope='managed')
    """
    parts = permission.split(".") if isinstance(permission, str) else []
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise InvalidPermissionError(f"Invalid permission format: {permission!r}", permission=permission)

    return PermissionParts(
        module=parts[0],
        action=parts[1],
        scope=parts[2] if len(parts) > 2 else None,
    )


def is_valid_permission(permission: str) -> bool:
    """Check the ``module.action[.scope]`` structure (2-3 non-empty parts)."""
    if not permission or not isinstance(permission, str):
        return False
    parts = permission.split(".")
    if len(parts) < 2 or len(parts) > 3:
        return False
    return all(parts)


def is_system_permission(permission: str) -> bool:
    """System permissions are the ``hierarchy.*`` and ``system.*`` tags."""
    return permission.startswith("hierarchy.") or permission.startswith("system.")


def group_permissions_by_module(permissions: Iterable[str]) -> dict[str, tuple[str, ...]]:
    """Group valid permissions by module; malformed tags are skipped."""
    groups: dict[str, list[str]] = {}
    for permission in sorted(set(permissions)):
        if not is_valid_permission(permission):
            logger.debug("Skipping malformed permission %r", permission)
            continue
        groups.setdefault(parse_permission(permission).module, []).append(permission)
    return {module: tuple(perms) for module, perms in groups.items()}


__all__ = [
    "PermissionParts",
    "effective_hierarchy_level",
    "group_permissions_by_module",
    "hierarchy_tags",
    "is_system_permission",
    "is_valid_permission",
    "normalize_permissions",
    "parse_permission",
]
