from .favorite_views import FavoriteViewSet
from .listing_views import ListingViewSet
from .reference_views import CategoryViewSet, ServerViewSet


__all__ = [
    "CategoryViewSet",
    "FavoriteViewSet",
    "ListingViewSet",
    "ServerViewSet",
]
