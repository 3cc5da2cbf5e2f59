"""Entry point for marketplace services; views and the container import from here."""

from marketplace.catalog.domain.services.favorite_service import FavoriteService
from marketplace.catalog.domain.services.listing_service import ListingService

__all__ = ["FavoriteService", "ListingService"]
