"""Input serializers shared by MessagingService and the chat API views."""

from rest_framework import serializers

from utils.validation import IdentifierField


class ConversationRequestSerializer(serializers.Serializer):
    """Counterpart of a new conversation: a user, a listing, or both."""

    other_user_id = IdentifierField(required=False, allow_null=True)
    product_id = IdentifierField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs.get("other_user_id") is None and attrs.get("product_id") is None:
            raise serializers.ValidationError({"other_user_id": "Provide other_user_id or product_id."})
        return attrs
