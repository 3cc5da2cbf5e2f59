from rest_framework import serializers

from marketplace.catalog.domain.models import ListingFavorite

from .listing_serializers import ListingSerializer


class ListingFavoriteSerializer(serializers.ModelSerializer):
    listing = ListingSerializer(read_only=True)

    class Meta:
        model = ListingFavorite
        fields = ["id", "listing", "created_at"]
        read_only_fields = fields


class FavoriteStatusSerializer(serializers.Serializer):
    listing_id = serializers.IntegerField()
    is_favorited = serializers.BooleanField()
