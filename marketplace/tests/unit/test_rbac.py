from types import SimpleNamespace

import pytest

from utils.rbac import (
    Principal,
    can_administer_users,
    can_ban_users,
    can_edit_content,
    can_manage_listing,
    can_moderate,
    can_view_listing,
    is_participant,
    require_not_banned,
    require_staff,
)
from utils.service_base import AuthorizationError, ErrorCodes

USER = Principal(id=1)
MODERATOR = Principal(id=2, role="moderator")
ADMIN = Principal(id=3, role="admin")


@pytest.mark.unit
class TestPrincipal:
    def test_from_anonymous_user(self):
        assert Principal.from_user(SimpleNamespace(is_authenticated=False)) is None
        assert Principal.from_user(None) is None

    def test_superuser_acts_as_admin(self):
        user = SimpleNamespace(is_authenticated=True, pk=5, role="user", is_superuser=True, is_banned=False)

        assert Principal.from_user(user) == Principal(id=5, role="admin")

    def test_unknown_role_falls_back_to_user(self):
        user = SimpleNamespace(is_authenticated=True, pk=6, role="seller", is_superuser=False, is_banned=True)

        assert Principal.from_user(user) == Principal(id=6, role="user", is_banned=True)


@pytest.mark.unit
class TestCapabilities:
    def test_only_staff_moderates(self):
        assert not can_moderate(USER)
        assert can_moderate(MODERATOR)
        assert can_moderate(ADMIN)
        assert not can_moderate(None)

    def test_owner_cannot_edit_content(self):
        assert not can_edit_content(USER)
        assert can_edit_content(MODERATOR)

    def test_manage_listing_is_owner_or_staff(self):
        assert can_manage_listing(USER, USER.id)
        assert not can_manage_listing(USER, 99)
        assert can_manage_listing(MODERATOR, 99)
        assert not can_manage_listing(None, 99)

    @pytest.mark.parametrize("status", ["pending", "rejected", "sold"])
    def test_non_approved_listing_visible_to_owner_and_staff(self, status):
        assert not can_view_listing(None, USER.id, status)
        assert not can_view_listing(Principal(id=50), USER.id, status)
        assert can_view_listing(USER, USER.id, status)
        assert can_view_listing(ADMIN, USER.id, status)

    def test_approved_listing_visible_to_everyone(self):
        assert can_view_listing(None, USER.id, "approved")

    def test_participant(self):
        conversation = SimpleNamespace(user_low_id=1, user_high_id=4)

        assert is_participant(USER, conversation)
        assert not is_participant(MODERATOR, conversation)
        assert not is_participant(None, conversation)

    def test_user_administration(self):
        assert can_administer_users(ADMIN)
        assert not can_administer_users(MODERATOR)
        assert can_ban_users(MODERATOR)
        assert not can_ban_users(USER)


@pytest.mark.unit
class TestGuards:
    def test_banned_principal_is_refused(self):
        with pytest.raises(AuthorizationError) as exc_info:
            require_not_banned(Principal(id=1, role="admin", is_banned=True))

        assert exc_info.value.code == ErrorCodes.USER_BANNED

    def test_anonymous_is_refused(self):
        with pytest.raises(AuthorizationError) as exc_info:
            require_not_banned(None)

        assert exc_info.value.code == ErrorCodes.PERMISSION_DENIED

    def test_require_staff(self):
        require_staff(MODERATOR)
        with pytest.raises(AuthorizationError):
            require_staff(USER)
