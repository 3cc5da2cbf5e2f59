from rest_framework import serializers

from authentication.api.serializers import PublicUserSerializer
from chat.domain.models import Message


class ModerationMessageSerializer(serializers.ModelSerializer):
    """Message with the context a moderator needs: who sent it, to whom, about what."""

    sender = PublicUserSerializer(read_only=True)
    participants = serializers.SerializerMethodField()
    product = serializers.SerializerMethodField()
    moderator_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Message
        fields = (
            "id",
            "conversation",
            "sender",
            "participants",
            "product",
            "content",
            "is_moderated",
            "moderator_id",
            "moderated_at",
            "created_at",
        )
        read_only_fields = fields

    def get_participants(self, obj):
        conversation = obj.conversation
        return PublicUserSerializer([conversation.user_low, conversation.user_high], many=True).data

    def get_product(self, obj):
        conversation = obj.conversation
        if not conversation.product_id:
            return None
        # The listing may be gone; the conversation keeps its id
        listing = conversation.product
        return {"id": conversation.product_id, "title": listing.title if listing else None}


class ModerationMessagePageSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    num_pages = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_previous = serializers.BooleanField()
    results = ModerationMessageSerializer(many=True)


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    page_size = serializers.IntegerField(required=False, min_value=1)
