"""Role checks for evaluation features."""

from __future__ import annotations

from typing import Callable, Optional

from ...models.profile import UserRole
from ...platform.config import settings

AdvancedAccessPolicy = Callable[[Optional[UserRole]], bool]

PREMIUM_ROLES = frozenset({UserRole.PREMIUM, UserRole.SUPERADMIN})


def allow_all_roles(role: Optional[UserRole]) -> bool:
    return True


def premium_roles_only(role: Optional[UserRole]) -> bool:
    return role in PREMIUM_ROLES


def advanced_access_policy() -> AdvancedAccessPolicy:
    """Gate for ADVANCED evaluations, selected by ADVANCED_EVALUATION_REQUIRES_PREMIUM."""
    if settings.ADVANCED_EVALUATION_REQUIRES_PREMIUM:
        return premium_roles_only
    return allow_all_roles


def can_view_history(role: Optional[UserRole]) -> bool:
    return role in PREMIUM_ROLES


def can_view_any_evaluation(role: Optional[UserRole]) -> bool:
    return role == UserRole.SUPERADMIN
