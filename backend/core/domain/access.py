"""
core.domain.access — Role helpers shared by every app's access rules.

The project has a fixed, small set of roles stored directly on the user
(``citizen``, ``investigator``, ``admin``).  Superusers are treated as
``admin`` everywhere.

╔══════════════════════════════════════════════════════════════════╗
║  Per-resource rules (who may read a complaint, who may delete   ║
║  a piece of evidence) do NOT live here.  They belong to the     ║
║  owning app's ``services.py``.  This module only answers        ║
║  "what role is this actor?" and "is it one of these?".          ║
╚══════════════════════════════════════════════════════════════════╝

    ┌─────────┐      ┌────────────────┐      ┌──────────────────┐
    │  View   │─────▶│  App service   │─────▶│ core.domain      │
    │ (thin)  │      │ (owns rules)   │      │   .access        │
    └─────────┘      └────────────────┘      └──────────────────┘

Usage in an app's service layer::

    from core.domain.access import require_role

    require_role(actor, "investigator", "admin")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from accounts.models import User

ADMIN = "admin"
INVESTIGATOR = "investigator"
CITIZEN = "citizen"

STAFF_ROLES: tuple[str, ...] = (INVESTIGATOR, ADMIN)


def is_authenticated(user: User | None) -> bool:
    return bool(user is not None and getattr(user, "is_authenticated", False))


def get_user_role_name(user: User | None) -> str | None:
    """
    Return the role name for a user, or ``None`` for anonymous actors.

    Args:
        user: ``User`` instance, ``AnonymousUser`` or ``None``.

    Returns:
        ``"admin"`` for superusers, otherwise the stored ``role`` value.
    """
    if not is_authenticated(user):
        return None
    if user.is_superuser:
        return ADMIN
    return getattr(user, "role", None) or None


def has_role(user: User | None, *allowed_roles: str) -> bool:
    return get_user_role_name(user) in allowed_roles


def require_role(user: User | None, *allowed_roles: str, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` if the user's role is not
    among ``allowed_roles``.

    Raises:
        core.domain.exceptions.PermissionDenied
    """
    if has_role(user, *allowed_roles):
        return
    raise PermissionDenied(
        message
        or f"This operation requires one of the roles: {', '.join(allowed_roles)}."
    )
