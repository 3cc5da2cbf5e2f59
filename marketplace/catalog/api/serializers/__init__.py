from .favorite_serializers import FavoriteStatusSerializer, ListingFavoriteSerializer
from .listing_serializers import (
    ListingContentSerializer,
    ListingCreateSerializer,
    ListingFilterSerializer,
    ListingPageSerializer,
    ListingSerializer,
    ModerationDecisionSerializer,
    PendingFilterSerializer,
    PriceUpdateSerializer,
)
from .reference_serializers import CategorySerializer, MinimalCategorySerializer, ServerSerializer


__all__ = [
    "CategorySerializer",
    "FavoriteStatusSerializer",
    "ListingContentSerializer",
    "ListingCreateSerializer",
    "ListingFavoriteSerializer",
    "ListingFilterSerializer",
    "ListingPageSerializer",
    "ListingSerializer",
    "MinimalCategorySerializer",
    "ModerationDecisionSerializer",
    "PendingFilterSerializer",
    "PriceUpdateSerializer",
    "ServerSerializer",
]
