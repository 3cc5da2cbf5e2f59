"""
Persistence access for listings, favorites and reference data.

Services never build querysets themselves; every read and write goes through
these repositories. Mutations are single statements so concurrent requests
cannot interleave field-by-field.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from marketplace.catalog.domain.models import Category, Listing, ListingFavorite, Server


logger = logging.getLogger(__name__)

LISTING_FILTER_FIELDS = ("status", "category_id", "subcategory_id", "server_id", "owner_id")


class ListingRepository:
    def _base(self) -> QuerySet:
        return Listing.objects.select_related("owner", "category", "subcategory", "server", "moderator")

    def get(self, listing_id) -> Optional[Listing]:
        return self._base().filter(pk=listing_id).first()

    def list(self, filters: Optional[Dict[str, Any]] = None, ordering: str = "-created_at") -> QuerySet:
        """Return a lazy queryset narrowed by the known filter fields; unknown keys are ignored."""
        filters = filters or {}
        lookup = {key: filters[key] for key in LISTING_FILTER_FIELDS if filters.get(key) is not None}
        if filters.get("status__in"):
            lookup["status__in"] = list(filters["status__in"])
        tiebreak = "-id" if ordering.startswith("-") else "id"
        return self._base().filter(**lookup).order_by(ordering, tiebreak)

    def insert(self, **fields) -> Listing:
        listing = Listing.objects.create(**fields)
        return self.get(listing.pk)

    def update(self, listing_id, **fields) -> int:
        """Unconditional single-row update; bumps updated_at."""
        return self.update_where(listing_id, None, **fields)

    def update_where(self, listing_id, statuses: Optional[Iterable[str]], **fields) -> int:
        """Update the row only while its status is one of ``statuses``.

        Returns the number of rows changed (0 or 1).
        """
        fields.setdefault("updated_at", timezone.now())
        qs = Listing.objects.filter(pk=listing_id)
        if statuses is not None:
            qs = qs.filter(status__in=list(statuses))
        return qs.update(**fields)

    def delete(self, listing_id) -> bool:
        deleted, _ = Listing.objects.filter(pk=listing_id).delete()
        return deleted > 0


class FavoriteRepository:
    def get(self, user_id, listing_id) -> Optional[ListingFavorite]:
        return ListingFavorite.objects.filter(user_id=user_id, listing_id=listing_id).first()

    def exists(self, user_id, listing_id) -> bool:
        return ListingFavorite.objects.filter(user_id=user_id, listing_id=listing_id).exists()

    def list_for_user(self, user_id) -> QuerySet:
        return (
            ListingFavorite.objects.filter(user_id=user_id)
            .select_related("listing", "listing__category", "listing__server", "listing__owner")
            .order_by("-created_at", "-id")
        )

    def insert(self, user_id, listing_id) -> Tuple[Optional[ListingFavorite], bool]:
        """Insert the pair, treating a unique-constraint hit as "already there".

        Returns ``(favorite, created)``. ``favorite`` is None only if the row
        vanished between the conflict and the re-read.
        """
        try:
            with transaction.atomic():
                return ListingFavorite.objects.create(user_id=user_id, listing_id=listing_id), True
        except IntegrityError:
            logger.debug(f"Favorite ({user_id}, {listing_id}) already exists")
            return self.get(user_id, listing_id), False

    def delete(self, user_id, listing_id) -> bool:
        deleted, _ = ListingFavorite.objects.filter(user_id=user_id, listing_id=listing_id).delete()
        return deleted > 0


class ReferenceValidator:
    """Existence checks for the entities a listing points at."""

    def category_exists(self, category_id) -> bool:
        return Category.objects.filter(pk=category_id).exists()

    def subcategory_of(self, subcategory_id, category_id) -> bool:
        return Category.objects.filter(pk=subcategory_id, parent_id=category_id).exists()

    def server_exists(self, server_id) -> bool:
        return Server.objects.filter(pk=server_id).exists()

    def user_exists(self, user_id) -> bool:
        return get_user_model().objects.filter(pk=user_id).exists()

    def get_category(self, category_id) -> Optional[Category]:
        return Category.objects.select_related("parent").filter(pk=category_id).first()

    def list_servers(self) -> QuerySet:
        return Server.objects.order_by("name")

    def list_all_categories(self) -> QuerySet:
        return Category.objects.select_related("parent").order_by("name")

    def list_categories(self, parent_id=None) -> QuerySet:
        qs = Category.objects.order_by("name")
        if parent_id is None:
            return qs.filter(parent__isnull=True)
        return qs.filter(parent_id=parent_id)
