from .catalog import Listing, ListingStatus
from .interaction import ListingFavorite
from .reference import Category, Server


__all__ = [
    "Category",
    "Server",
    "Listing",
    "ListingStatus",
    "ListingFavorite",
]
