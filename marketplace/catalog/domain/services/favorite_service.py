"""
FavoriteService - per-user bookmarks on listings.

Adding is idempotent: the (user, listing) unique constraint decides races and
"already favorited" is reported as success with ``created=False``.
"""

from typing import List, Optional, Tuple

from infrastructure.container import container
from infrastructure.notifications import FAVORITES
from marketplace.catalog.domain.models import ListingFavorite
from marketplace.catalog.domain.repositories import FavoriteRepository, ListingRepository
from marketplace.domain.events import favorite_changed
from marketplace.infra.observability.metrics import favorites_changed_total
from utils.rbac import Principal, can_view_listing, require_not_banned
from utils.service_base import (
    AuthorizationError,
    BaseService,
    ConflictError,
    ErrorCodes,
    NotFoundError,
    ServiceError,
    ServiceResult,
    service_fail,
    service_ok,
)


class FavoriteService(BaseService):
    def __init__(self, favorites=None, listings=None, notifier=None):
        super().__init__()
        self.favorites = favorites or FavoriteRepository()
        self.listings = listings or ListingRepository()
        self.notifier = notifier or container.notifier()

    @BaseService.log_performance
    def add_favorite(
        self, principal: Optional[Principal], listing_id: int
    ) -> ServiceResult[Tuple[ListingFavorite, bool]]:
        try:
            require_not_banned(principal)
            self._require_listing(principal, listing_id)

            favorite, created = self.favorites.insert(principal.id, listing_id)
            if favorite is None:
                # Lost the race to a concurrent add and a concurrent remove
                raise ConflictError(f"Favorite on listing {listing_id} changed concurrently, retry")

            if created:
                favorites_changed_total.labels(action="add").inc()
                self.notifier.notify_on_commit([FAVORITES], favorite_changed(listing_id, principal.id, True).to_dict())
            return service_ok((favorite, created))
        except ServiceError as e:
            return service_fail(e)

    @BaseService.log_performance
    def remove_favorite(self, principal: Optional[Principal], listing_id: int) -> ServiceResult[bool]:
        """Remove the bookmark. Returns whether a row was removed; missing rows are not an error."""
        try:
            require_not_banned(principal)
            removed = self.favorites.delete(principal.id, listing_id)
            if removed:
                favorites_changed_total.labels(action="remove").inc()
                self.notifier.notify_on_commit(
                    [FAVORITES], favorite_changed(listing_id, principal.id, False).to_dict()
                )
            return service_ok(removed)
        except ServiceError as e:
            return service_fail(e)

    @BaseService.log_performance
    def is_favorite(self, principal: Optional[Principal], listing_id: int) -> ServiceResult[bool]:
        if principal is None:
            return service_ok(False)
        return service_ok(self.favorites.exists(principal.id, listing_id))

    @BaseService.log_performance
    def list_favorites(self, principal: Optional[Principal]) -> ServiceResult[List[ListingFavorite]]:
        """Bookmarks whose listing the caller can still see; others stay stored but hidden."""
        try:
            if principal is None:
                raise AuthorizationError("Authentication required.")
            favorites = [
                favorite
                for favorite in self.favorites.list_for_user(principal.id)
                if can_view_listing(principal, favorite.listing.owner_id, favorite.listing.status)
            ]
            return service_ok(favorites)
        except ServiceError as e:
            return service_fail(e)

    def _require_listing(self, principal: Principal, listing_id):
        # Listings the caller cannot see are reported as missing
        listing = self.listings.get(listing_id)
        if listing is None or not can_view_listing(principal, listing.owner_id, listing.status):
            raise NotFoundError(f"Listing {listing_id} not found", code=ErrorCodes.LISTING_NOT_FOUND)
