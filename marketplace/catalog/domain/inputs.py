"""Input serializers shared by ListingService and the listing API views."""

from rest_framework import serializers

from utils.pagination import marketplace_setting
from utils.validation import IdentifierField, PriceField

TITLE_MAX_LENGTH = 200
CONTENT_FIELDS = ("title", "description", "price")


class ListingDraftSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField()
    price = PriceField()
    category_id = IdentifierField()
    subcategory_id = IdentifierField(required=False, allow_null=True)
    server_id = IdentifierField()
    images = serializers.ListField(
        child=serializers.CharField(), required=False, allow_null=True, default=list
    )
    # Shape depends on the root category; checked by parse_metadata
    metadata = serializers.JSONField(required=False, allow_null=True, default=dict)

    def validate_images(self, value):
        images = value or []
        max_images = marketplace_setting("MAX_IMAGES_PER_LISTING", 10)
        if len(images) > max_images:
            raise serializers.ValidationError(f"At most {max_images} images are allowed.")
        return images


class ListingContentPatchSerializer(serializers.Serializer):
    """Staff content edit; every field optional, unknown keys refused by the service."""

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH, required=False)
    description = serializers.CharField(required=False)
    price = PriceField(required=False)


class PriceSerializer(serializers.Serializer):
    price = PriceField()
