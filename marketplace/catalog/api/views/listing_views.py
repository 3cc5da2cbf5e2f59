from django.http import QueryDict
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly

from infrastructure.container import container
from marketplace.catalog.api.serializers import (
    ListingContentSerializer,
    ListingCreateSerializer,
    ListingFilterSerializer,
    ListingPageSerializer,
    ListingSerializer,
    ModerationDecisionSerializer,
    PendingFilterSerializer,
    PriceUpdateSerializer,
)
from marketplace.catalog.domain.models import ListingStatus
from marketplace.permissions import IsModeratorOrAdmin
from marketplace.services import ListingService
from utils.api import ErrorResponseSerializer, principal_of, result_response


ERROR_RESPONSES = {
    400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
    403: OpenApiResponse(response=ErrorResponseSerializer, description="Permission denied or user banned"),
    404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
}


class ListingViewSet(viewsets.ViewSet):
    """
    Listing lifecycle endpoints.

    Public reads return approved listings; everything else goes through
    ListingService, which owns authorization and validation.
    """

    permission_classes = [IsAuthenticatedOrReadOnly]
    lookup_value_regex = r"\d+"

    def get_service(self) -> ListingService:
        return container.listing_service()

    def get_permissions(self):
        if self.action == "mine":
            return [IsAuthenticated()]
        if self.action == "pending":
            return [IsAuthenticated(), IsModeratorOrAdmin()]
        return super().get_permissions()

    def _context(self, request, principal):
        return {"request": request, "principal": principal}

    def _listing_data(self, request, principal):
        context = self._context(request, principal)
        return lambda listing: ListingSerializer(listing, context=context).data

    def _many_data(self, request, principal):
        context = self._context(request, principal)
        return lambda listings: ListingSerializer(listings, many=True, context=context).data

    def _page_data(self, request, principal):
        serialize_many = self._many_data(request, principal)

        def serialize_page(page):
            return {**page, "results": serialize_many(page["results"])}

        return serialize_page

    @extend_schema(
        operation_id="listings_list",
        summary="Public catalog of approved listings",
        description="Newest first. Moderators may pass status=pending to get the moderation queue.",
        parameters=[
            OpenApiParameter(name="category_id", type=int, description="Filter by category"),
            OpenApiParameter(name="subcategory_id", type=int, description="Filter by subcategory"),
            OpenApiParameter(name="server_id", type=int, description="Filter by server"),
            OpenApiParameter(name="owner_id", type=int, description="Filter by owner"),
            OpenApiParameter(name="status", type=str, description="Only 'pending' is accepted (moderators)"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page"),
        ],
        responses={200: ListingPageSerializer},
        tags=["Marketplace - Listings"],
    )
    def list(self, request):
        if request.query_params.get("status") == ListingStatus.PENDING:
            return self._pending_queue(request)

        filters = ListingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = dict(filters.validated_data)
        page = params.pop("page", 1)
        page_size = params.pop("page_size", None)

        principal = principal_of(request)
        serialize_page = self._page_data(request, principal)
        result = self.get_service().list_listings(params, page, page_size)
        return result_response(result, serialize_page)

    @extend_schema(
        operation_id="listings_retrieve",
        summary="Get a listing",
        responses={200: ListingSerializer, 404: ERROR_RESPONSES[404]},
        tags=["Marketplace - Listings"],
    )
    def retrieve(self, request, pk=None):
        principal = principal_of(request)
        serialize_listing = self._listing_data(request, principal)
        return result_response(self.get_service().get_listing(principal, int(pk)), serialize_listing)

    @extend_schema(
        operation_id="listings_create",
        summary="Submit a listing for moderation",
        request=ListingCreateSerializer,
        responses={201: ListingSerializer, 400: ERROR_RESPONSES[400], 403: ERROR_RESPONSES[403]},
        tags=["Marketplace - Listings"],
    )
    def create(self, request):
        serializer = ListingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        principal = principal_of(request)
        serialize_listing = self._listing_data(request, principal)
        result = self.get_service().create_listing(principal, serializer.validated_data)
        return result_response(result, serialize_listing, success_status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="listings_update_content",
        summary="Edit title, description or price (moderator/admin)",
        request=ListingContentSerializer,
        responses={200: ListingSerializer, **ERROR_RESPONSES},
        tags=["Marketplace - Moderation"],
    )
    def update(self, request, pk=None):
        principal = principal_of(request)
        serialize_listing = self._listing_data(request, principal)
        patch = request.data
        if isinstance(patch, QueryDict):
            patch = patch.dict()
        return result_response(self.get_service().update_content(principal, int(pk), patch), serialize_listing)

    @extend_schema(
        operation_id="listings_delete",
        summary="Delete a listing (owner, moderator or admin)",
        responses={204: OpenApiResponse(description="Listing deleted"), **ERROR_RESPONSES},
        tags=["Marketplace - Listings"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_listing(principal_of(request), int(pk))
        return result_response(result, success_status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="listings_mine",
        summary="The caller's own listings in every state",
        responses={200: ListingSerializer(many=True)},
        tags=["Marketplace - Listings"],
    )
    @action(detail=False, methods=["get"])
    def mine(self, request):
        principal = principal_of(request)
        serialize_many = self._many_data(request, principal)
        return result_response(self.get_service().list_owner_listings(principal), serialize_many)

    @extend_schema(
        operation_id="listings_pending",
        summary="Moderation queue (moderator/admin)",
        parameters=[
            OpenApiParameter(name="category_id", type=int, description="Filter by category"),
            OpenApiParameter(name="server_id", type=int, description="Filter by server"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page"),
        ],
        responses={200: ListingPageSerializer, 403: ERROR_RESPONSES[403]},
        tags=["Marketplace - Moderation"],
    )
    @action(detail=False, methods=["get"])
    def pending(self, request):
        return self._pending_queue(request)

    def _pending_queue(self, request):
        filters = PendingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = dict(filters.validated_data)
        page = params.pop("page", 1)
        page_size = params.pop("page_size", None)

        principal = principal_of(request)
        serialize_page = self._page_data(request, principal)
        return result_response(self.get_service().list_pending(principal, params, page, page_size), serialize_page)

    @extend_schema(
        operation_id="listings_decide_moderation",
        summary="Approve or reject a listing (moderator/admin)",
        request=ModerationDecisionSerializer,
        responses={200: ListingSerializer, **ERROR_RESPONSES},
        tags=["Marketplace - Moderation"],
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def decide(self, request, pk=None):
        serializer = ModerationDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        principal = principal_of(request)
        serialize_listing = self._listing_data(request, principal)
        result = self.get_service().decide_moderation(
            principal,
            int(pk),
            serializer.validated_data["status"],
            serializer.validated_data.get("moderator_note"),
        )
        return result_response(result, serialize_listing)

    @extend_schema(
        operation_id="listings_update_price",
        summary="Change the price (owner, moderator or admin)",
        request=PriceUpdateSerializer,
        responses={200: ListingSerializer, **ERROR_RESPONSES},
        tags=["Marketplace - Listings"],
    )
    @action(detail=True, methods=["patch"], url_path="price")
    def update_price(self, request, pk=None):
        serializer = PriceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        principal = principal_of(request)
        serialize_listing = self._listing_data(request, principal)
        result = self.get_service().update_price(principal, int(pk), serializer.validated_data["price"])
        return result_response(result, serialize_listing)

    @extend_schema(
        operation_id="listings_mark_sold",
        summary="Mark an approved listing as sold (owner, moderator or admin)",
        request=None,
        responses={200: ListingSerializer, **ERROR_RESPONSES},
        tags=["Marketplace - Listings"],
    )
    @action(detail=True, methods=["post"], url_path="sold")
    def mark_sold(self, request, pk=None):
        principal = principal_of(request)
        serialize_listing = self._listing_data(request, principal)
        return result_response(self.get_service().mark_sold(principal, int(pk)), serialize_listing)
