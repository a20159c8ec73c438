"""Profile role vocabulary.

Judges no longer hold accounts (they score through tokens), so 'judge' is a
legacy role that migrates to 'user'.
"""
from __future__ import annotations

import logging
from typing import Any, Literal

logger = logging.getLogger(__name__)

ProfileRole = Literal["user", "admin", "organizer"]

VALID_ROLES: tuple[ProfileRole, ...] = ("user", "admin", "organizer")
DEFAULT_ROLE: ProfileRole = "user"
ELEVATED_ROLES: tuple[ProfileRole, ...] = ("admin", "organizer")
LEGACY_ROLES = ("judge",)


def is_valid_profile_role(role: Any) -> bool:
    return isinstance(role, str) and role in VALID_ROLES


def is_elevated_role(role: Any) -> bool:
    return isinstance(role, str) and role in ELEVATED_ROLES


def validate_profile_role_update(role: Any) -> ProfileRole:
    """Return the role unchanged or raise ValueError for anything outside VALID_ROLES."""
    if not is_valid_profile_role(role):
        raise ValueError(
            f"Invalid profile role: {role}. Valid roles are: {', '.join(VALID_ROLES)}"
        )
    return role


def migrate_legacy_role(role: str) -> ProfileRole:
    if is_valid_profile_role(role):
        return role
    if role not in LEGACY_ROLES:
        logger.warning(f"Unknown profile role {role!r} migrated to {DEFAULT_ROLE!r}")
    return DEFAULT_ROLE


__all__ = [
    "DEFAULT_ROLE",
    "ELEVATED_ROLES",
    "LEGACY_ROLES",
    "ProfileRole",
    "VALID_ROLES",
    "is_elevated_role",
    "is_valid_profile_role",
    "migrate_legacy_role",
    "validate_profile_role_update",
]
