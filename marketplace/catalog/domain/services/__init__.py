from .favorite_service import FavoriteService
from .listing_service import ListingService


__all__ = [
    "FavoriteService",
    "ListingService",
]
