import pytest

from authentication.domain.services import UserAdministrationService
from marketplace.tests.factories import AdminFactory, BannedUserFactory, ModeratorFactory, UserFactory
from utils.rbac import Principal
from utils.service_base import ErrorCodes, ErrorKind


@pytest.fixture
def service():
    return UserAdministrationService()


@pytest.mark.unit
@pytest.mark.django_db
class TestSetRole:
    def test_admin_promotes_user(self, service):
        admin = AdminFactory()
        user = UserFactory()

        result = service.set_role(Principal.from_user(admin), user.pk, "moderator")

        assert result.ok is True
        assert result.value.role == "moderator"

    def test_moderator_cannot_change_roles(self, service):
        moderator = ModeratorFactory()
        user = UserFactory()

        result = service.set_role(Principal.from_user(moderator), user.pk, "admin")

        assert result.kind == ErrorKind.AUTHORIZATION
        user.refresh_from_db()
        assert user.role == "user"

    def test_unknown_role(self, service):
        result = service.set_role(Principal.from_user(AdminFactory()), UserFactory().pk, "superhero")

        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert "role" in result.error_fields

    def test_unknown_user(self, service):
        result = service.set_role(Principal.from_user(AdminFactory()), 999999, "moderator")

        assert result.error == ErrorCodes.USER_NOT_FOUND


@pytest.mark.unit
@pytest.mark.django_db
class TestBanning:
    def test_moderator_bans_user(self, service):
        user = UserFactory()

        result = service.ban_user(Principal.from_user(ModeratorFactory()), user.pk, "  Scamming buyers  ")

        assert result.ok is True
        assert result.value.is_banned is True
        assert result.value.ban_reason == "Scamming buyers"

    def test_blank_reason_is_stored_as_null(self, service):
        result = service.ban_user(Principal.from_user(ModeratorFactory()), UserFactory().pk, "   ")

        assert result.value.ban_reason is None

    def test_moderator_cannot_ban_admin(self, service):
        admin = AdminFactory()

        result = service.ban_user(Principal.from_user(ModeratorFactory()), admin.pk)

        assert result.kind == ErrorKind.AUTHORIZATION
        admin.refresh_from_db()
        assert admin.is_banned is False

    def test_admin_can_ban_admin(self, service):
        result = service.ban_user(Principal.from_user(AdminFactory()), AdminFactory().pk)

        assert result.ok is True

    def test_cannot_ban_yourself(self, service):
        moderator = ModeratorFactory()

        result = service.ban_user(Principal.from_user(moderator), moderator.pk)

        assert result.error == ErrorCodes.VALIDATION_ERROR

    def test_regular_user_cannot_ban(self, service):
        result = service.ban_user(Principal.from_user(UserFactory()), UserFactory().pk)

        assert result.error == ErrorCodes.PERMISSION_DENIED

    def test_ban_unknown_user(self, service):
        result = service.ban_user(Principal.from_user(ModeratorFactory()), 999999)

        assert result.kind == ErrorKind.NOT_FOUND

    def test_unban_clears_reason(self, service):
        banned = BannedUserFactory()

        result = service.unban_user(Principal.from_user(ModeratorFactory()), banned.pk)

        assert result.value.is_banned is False
        assert result.value.ban_reason is None

    def test_banned_moderator_cannot_unban(self, service):
        moderator = ModeratorFactory(is_banned=True)

        result = service.unban_user(Principal.from_user(moderator), BannedUserFactory().pk)

        assert result.error == ErrorCodes.USER_BANNED

    def test_list_users_is_staff_only(self, service):
        UserFactory.create_batch(2)

        assert service.list_users(Principal.from_user(UserFactory())).ok is False
        assert len(service.list_users(Principal.from_user(ModeratorFactory())).value) == 4
