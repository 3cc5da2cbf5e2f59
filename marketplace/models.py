from marketplace.catalog.domain.models import Category, Listing, ListingFavorite, ListingStatus, Server


__all__ = [
    "Category",
    "Server",
    "Listing",
    "ListingStatus",
    "ListingFavorite",
]
