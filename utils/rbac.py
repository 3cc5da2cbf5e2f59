"""
Principal resolution and role-based capability checks.

Every mutating service operation receives a ``Principal`` instead of a raw
user object. Predicates here are the only place role/ownership rules live;
views and services call them by name.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from utils.service_base import AuthorizationError, ErrorCodes

# Canonical role names
ROLE_USER = "user"
ROLE_MODERATOR = "moderator"
ROLE_ADMIN = "admin"

ROLES = (ROLE_USER, ROLE_MODERATOR, ROLE_ADMIN)
STAFF_ROLES = (ROLE_MODERATOR, ROLE_ADMIN)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The verified actor of a request."""

    id: int
    role: str = ROLE_USER
    is_banned: bool = False

    @classmethod
    def from_user(cls, user) -> Optional["Principal"]:
        """Build a principal from an authenticated user, or None for anonymous requests."""
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        role = getattr(user, "role", ROLE_USER)
        if role not in ROLES:
            role = ROLE_USER
        # Superusers created via createsuperuser act as admins
        if getattr(user, "is_superuser", False):
            role = ROLE_ADMIN
        return cls(id=user.pk, role=role, is_banned=bool(getattr(user, "is_banned", False)))


def is_staff_role(principal: Optional[Principal]) -> bool:
    return principal is not None and principal.role in STAFF_ROLES


def is_admin(principal: Optional[Principal]) -> bool:
    return principal is not None and principal.role == ROLE_ADMIN


def is_owner(principal: Optional[Principal], owner_id) -> bool:
    return principal is not None and owner_id is not None and principal.id == owner_id


def can_moderate(principal: Optional[Principal]) -> bool:
    """Approve/reject listings, flag messages, view moderation queues."""
    return is_staff_role(principal)


def can_edit_content(principal: Optional[Principal]) -> bool:
    """Full content edits are staff-only; owning the listing is not enough."""
    return is_staff_role(principal)


def can_manage_listing(principal: Optional[Principal], owner_id) -> bool:
    """Price edits, mark-sold and deletion: owner, moderator or admin."""
    return is_owner(principal, owner_id) or is_staff_role(principal)


def can_view_listing(principal: Optional[Principal], owner_id, status: str) -> bool:
    if status == "approved":
        return True
    return can_manage_listing(principal, owner_id)


def is_participant(principal: Optional[Principal], conversation) -> bool:
    """Conversation participation grants send/read rights."""
    return principal is not None and principal.id in (conversation.user_low_id, conversation.user_high_id)


def can_administer_users(principal: Optional[Principal]) -> bool:
    """Changing roles is admin-only."""
    return is_admin(principal)


def can_ban_users(principal: Optional[Principal]) -> bool:
    return is_staff_role(principal)


def require_not_banned(principal: Optional[Principal]):
    """Raise AuthorizationError for anonymous or banned principals."""
    if principal is None:
        raise AuthorizationError("Authentication required.")
    if principal.is_banned:
        logger.warning("RBAC denial: banned user_id=%s attempted a mutating action", principal.id)
        raise AuthorizationError("Banned users cannot perform this action.", code=ErrorCodes.USER_BANNED)


def has_any_role(principal: Optional[Principal], roles: Iterable[str]) -> bool:
    return principal is not None and principal.role in set(roles)


def require_role(principal: Optional[Principal], roles: Iterable[str]):
    """Raise AuthorizationError unless the principal has one of the roles."""
    roles = list(roles)
    if not has_any_role(principal, roles):
        logger.warning(
            "RBAC denial: user_id=%s required=%s",
            getattr(principal, "id", None),
            roles,
        )
        raise AuthorizationError("Insufficient role to access this resource.")


# Convenience guard
def require_staff(principal: Optional[Principal]):
    require_role(principal, STAFF_ROLES)
