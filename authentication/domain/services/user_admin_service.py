"""
UserAdministrationService - role and ban management for staff.

Role changes are admin-only. Moderators and admins may ban/unban users,
but nobody may ban themselves and moderators may not ban admins.
"""

from typing import List, Optional

from django.contrib.auth import get_user_model
from django.db import transaction

from utils.rbac import (
    ROLE_ADMIN,
    ROLES,
    Principal,
    can_administer_users,
    can_ban_users,
    require_not_banned,
    require_staff,
)
from utils.service_base import (
    AuthorizationError,
    BaseService,
    ErrorCodes,
    NotFoundError,
    ServiceError,
    ServiceResult,
    ValidationError,
    service_fail,
    service_ok,
)


User = get_user_model()


class UserAdministrationService(BaseService):
    @BaseService.log_performance
    def list_users(self, principal: Principal) -> ServiceResult[List[User]]:
        try:
            require_staff(principal)
            return service_ok(list(User.objects.order_by("date_joined")))
        except ServiceError as e:
            return service_fail(e)

    @BaseService.log_performance
    @transaction.atomic
    def set_role(self, principal: Principal, user_id: int, role: str) -> ServiceResult[User]:
        try:
            require_not_banned(principal)
            if not can_administer_users(principal):
                raise AuthorizationError("Only admins can change roles.")
            if role not in ROLES:
                raise ValidationError.for_fields(
                    {"role": [f"Role must be one of {', '.join(ROLES)}."]}, "Invalid role"
                )

            updated = User.objects.filter(pk=user_id).update(role=role)
            if not updated:
                raise NotFoundError(f"User {user_id} not found", code=ErrorCodes.USER_NOT_FOUND)

            self.logger.info(f"User {user_id} role set to {role} by {principal.id}")
            return service_ok(User.objects.get(pk=user_id))
        except ServiceError as e:
            return service_fail(e)

    @BaseService.log_performance
    @transaction.atomic
    def ban_user(self, principal: Principal, user_id: int, reason: Optional[str] = None) -> ServiceResult[User]:
        try:
            require_not_banned(principal)
            if not can_ban_users(principal):
                raise AuthorizationError("Only moderators and admins can ban users.")
            if principal.id == user_id:
                raise ValidationError("You cannot ban yourself.")

            target = self._get_user(user_id)
            if target.is_admin() and principal.role != ROLE_ADMIN:
                raise AuthorizationError("Only admins can ban admins.")

            reason = (reason or "").strip() or None
            User.objects.filter(pk=user_id).update(is_banned=True, ban_reason=reason)

            self.logger.info(f"User {user_id} banned by {principal.id}")
            return service_ok(User.objects.get(pk=user_id))
        except ServiceError as e:
            return service_fail(e)

    @BaseService.log_performance
    @transaction.atomic
    def unban_user(self, principal: Principal, user_id: int) -> ServiceResult[User]:
        try:
            require_not_banned(principal)
            if not can_ban_users(principal):
                raise AuthorizationError("Only moderators and admins can unban users.")

            updated = User.objects.filter(pk=user_id).update(is_banned=False, ban_reason=None)
            if not updated:
                raise NotFoundError(f"User {user_id} not found", code=ErrorCodes.USER_NOT_FOUND)

            self.logger.info(f"User {user_id} unbanned by {principal.id}")
            return service_ok(User.objects.get(pk=user_id))
        except ServiceError as e:
            return service_fail(e)

    def _get_user(self, user_id: int) -> User:
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFoundError(f"User {user_id} not found", code=ErrorCodes.USER_NOT_FOUND)
