from unittest.mock import MagicMock

import pytest

from infrastructure.notifications import FAVORITES
from marketplace.catalog.domain.services.favorite_service import FavoriteService
from marketplace.models import ListingStatus
from utils.rbac import Principal
from utils.service_base import ErrorCodes, ErrorKind

USER = Principal(id=1)
BANNED = Principal(id=2, is_banned=True)
OWNER = Principal(id=3)
MODERATOR = Principal(id=10, role="moderator")


def make_listing(owner_id=OWNER.id, status=ListingStatus.APPROVED):
    listing = MagicMock()
    listing.owner_id = owner_id
    listing.status = status
    return listing


def make_favorite(listing):
    favorite = MagicMock()
    favorite.listing = listing
    return favorite


@pytest.fixture
def favorites():
    return MagicMock()


@pytest.fixture
def listings():
    repo = MagicMock()
    repo.get.return_value = make_listing()
    return repo


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def favorite_service(favorites, listings, notifier):
    return FavoriteService(favorites=favorites, listings=listings, notifier=notifier)


@pytest.mark.unit
class TestFavoriteService:
    def test_add_favorite_creates(self, favorite_service, favorites, notifier):
        favorite = MagicMock()
        favorites.insert.return_value = (favorite, True)

        result = favorite_service.add_favorite(USER, 100)

        assert result.ok is True
        assert result.value == (favorite, True)
        favorites.insert.assert_called_once_with(USER.id, 100)
        topics, payload = notifier.notify_on_commit.call_args.args
        assert topics == [FAVORITES]
        assert payload["event_type"] == "favorite.added"

    def test_add_favorite_twice_is_success_without_notification(self, favorite_service, favorites, notifier):
        favorites.insert.return_value = (MagicMock(), False)

        result = favorite_service.add_favorite(USER, 100)

        assert result.ok is True
        assert result.value[1] is False
        notifier.notify_on_commit.assert_not_called()

    def test_add_favorite_unknown_listing(self, favorite_service, favorites, listings):
        listings.get.return_value = None

        result = favorite_service.add_favorite(USER, 100)

        assert result.ok is False
        assert result.error == ErrorCodes.LISTING_NOT_FOUND
        assert result.kind == ErrorKind.NOT_FOUND
        favorites.insert.assert_not_called()

    def test_add_favorite_lost_race(self, favorite_service, favorites):
        favorites.insert.return_value = (None, False)

        result = favorite_service.add_favorite(USER, 100)

        assert result.ok is False
        assert result.error == ErrorCodes.CONFLICT

    def test_banned_user_cannot_favorite(self, favorite_service, favorites):
        result = favorite_service.add_favorite(BANNED, 100)

        assert result.ok is False
        assert result.error == ErrorCodes.USER_BANNED
        favorites.insert.assert_not_called()

    def test_remove_favorite(self, favorite_service, favorites, notifier):
        favorites.delete.return_value = True

        result = favorite_service.remove_favorite(USER, 100)

        assert result.ok is True
        assert result.value is True
        assert notifier.notify_on_commit.call_args.args[1]["event_type"] == "favorite.removed"

    def test_remove_missing_favorite_is_success(self, favorite_service, favorites, notifier):
        favorites.delete.return_value = False

        result = favorite_service.remove_favorite(USER, 100)

        assert result.ok is True
        assert result.value is False
        notifier.notify_on_commit.assert_not_called()

    def test_is_favorite_for_anonymous_is_false(self, favorite_service, favorites):
        result = favorite_service.is_favorite(None, 100)

        assert result.ok is True
        assert result.value is False
        favorites.exists.assert_not_called()

    def test_list_favorites_requires_authentication(self, favorite_service):
        assert favorite_service.list_favorites(None).error == ErrorCodes.PERMISSION_DENIED

    @pytest.mark.parametrize("status", [ListingStatus.PENDING, ListingStatus.REJECTED])
    def test_stranger_cannot_favorite_hidden_listing(self, favorite_service, favorites, listings, status):
        listings.get.return_value = make_listing(status=status)

        result = favorite_service.add_favorite(USER, 100)

        assert result.ok is False
        assert result.error == ErrorCodes.LISTING_NOT_FOUND
        favorites.insert.assert_not_called()

    def test_owner_and_staff_can_favorite_pending_listing(self, favorite_service, favorites, listings):
        listings.get.return_value = make_listing(status=ListingStatus.PENDING)
        favorites.insert.return_value = (MagicMock(), True)

        assert favorite_service.add_favorite(OWNER, 100).ok is True
        assert favorite_service.add_favorite(MODERATOR, 100).ok is True

    def test_list_favorites_hides_listings_the_user_cannot_see(self, favorite_service, favorites):
        visible = make_favorite(make_listing(status=ListingStatus.APPROVED))
        sold = make_favorite(make_listing(status=ListingStatus.SOLD))
        rejected = make_favorite(make_listing(status=ListingStatus.REJECTED))
        own_pending = make_favorite(make_listing(owner_id=USER.id, status=ListingStatus.PENDING))
        favorites.list_for_user.return_value = [visible, sold, rejected, own_pending]

        result = favorite_service.list_favorites(USER)

        assert result.ok is True
        assert result.value == [visible, own_pending]
