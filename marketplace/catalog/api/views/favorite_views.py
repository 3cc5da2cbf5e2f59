from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated

from infrastructure.container import container
from marketplace.catalog.api.serializers import FavoriteStatusSerializer, ListingFavoriteSerializer
from utils.api import ErrorResponseSerializer, principal_of, result_response


class FavoriteViewSet(viewsets.ViewSet):
    """
    GET    /api/marketplace/favorites/
    GET    /api/marketplace/favorites/{listing_id}/
    POST   /api/marketplace/favorites/{listing_id}/
    DELETE /api/marketplace/favorites/{listing_id}/
    """

    permission_classes = [IsAuthenticated]

    def get_service(self):
        return container.favorite_service()

    @extend_schema(responses={200: ListingFavoriteSerializer(many=True)}, tags=["Marketplace - Favorites"])
    def list(self, request):
        principal = principal_of(request)
        context = {"request": request, "principal": principal}
        result = self.get_service().list_favorites(principal)
        return result_response(
            result, lambda favorites: ListingFavoriteSerializer(favorites, many=True, context=context).data
        )

    @extend_schema(responses={200: FavoriteStatusSerializer}, tags=["Marketplace - Favorites"])
    def retrieve(self, request, listing_id=None):
        result = self.get_service().is_favorite(principal_of(request), listing_id)
        return result_response(result, lambda favorited: {"listing_id": listing_id, "is_favorited": favorited})

    @extend_schema(
        request=None,
        responses={
            200: OpenApiResponse(response=FavoriteStatusSerializer, description="Already favorited"),
            201: OpenApiResponse(response=FavoriteStatusSerializer, description="Favorite added"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="User banned"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
        },
        tags=["Marketplace - Favorites"],
    )
    def add(self, request, listing_id=None):
        result = self.get_service().add_favorite(principal_of(request), listing_id)
        if not result.ok:
            return result_response(result)
        _, created = result.value
        return result_response(
            result,
            lambda _: {"listing_id": listing_id, "is_favorited": True},
            success_status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(responses={200: FavoriteStatusSerializer}, tags=["Marketplace - Favorites"])
    def destroy(self, request, listing_id=None):
        result = self.get_service().remove_favorite(principal_of(request), listing_id)
        return result_response(result, lambda _: {"listing_id": listing_id, "is_favorited": False})
