from rest_framework import serializers

from authentication.api.serializers import PublicUserSerializer
from marketplace.catalog.domain.inputs import ListingContentPatchSerializer, ListingDraftSerializer, PriceSerializer
from marketplace.catalog.domain.models import Listing, ListingStatus
from utils.rbac import can_manage_listing

from .reference_serializers import MinimalCategorySerializer, ServerSerializer


class ListingSerializer(serializers.ModelSerializer):
    """
    Listing projection used by every listing endpoint.

    Moderation fields are only shown to the owner and to staff; a rejected
    listing's note is how the owner learns why it was turned down.
    """

    owner = PublicUserSerializer(read_only=True)
    category = MinimalCategorySerializer(read_only=True)
    subcategory = MinimalCategorySerializer(read_only=True)
    server = ServerSerializer(read_only=True)
    moderator_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Listing
        fields = [
            "id",
            "owner",
            "category",
            "subcategory",
            "server",
            "title",
            "description",
            "price",
            "images",
            "metadata",
            "status",
            "moderator_id",
            "moderator_note",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        principal = self.context.get("principal")
        if not can_manage_listing(principal, instance.owner_id):
            data.pop("moderator_id", None)
            data.pop("moderator_note", None)
        return data


class ListingCreateSerializer(ListingDraftSerializer):
    """Request body for POST /listings/."""


class ListingContentSerializer(ListingContentPatchSerializer):
    """Request shape for staff content edits; unknown keys are refused by the service."""


class ModerationDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[ListingStatus.APPROVED, ListingStatus.REJECTED])
    moderator_note = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PriceUpdateSerializer(PriceSerializer):
    """Request body for PATCH /listings/{id}/price/."""


class ListingFilterSerializer(serializers.Serializer):
    category_id = serializers.IntegerField(required=False)
    subcategory_id = serializers.IntegerField(required=False)
    server_id = serializers.IntegerField(required=False)
    owner_id = serializers.IntegerField(required=False)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    page_size = serializers.IntegerField(required=False, min_value=1)


class PendingFilterSerializer(serializers.Serializer):
    category_id = serializers.IntegerField(required=False)
    server_id = serializers.IntegerField(required=False)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    page_size = serializers.IntegerField(required=False, min_value=1)


class ListingPageSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    num_pages = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_previous = serializers.BooleanField()
    results = ListingSerializer(many=True)
