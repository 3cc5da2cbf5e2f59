from rest_framework import serializers

from authentication.api.serializers import PublicUserSerializer
from chat.domain.inputs import ConversationRequestSerializer
from chat.domain.models import Conversation, Message


class MessageSerializer(serializers.ModelSerializer):
    sender = PublicUserSerializer(read_only=True)

    class Meta:
        model = Message
        fields = ("id", "conversation", "sender", "content", "is_moderated", "read_at", "created_at")
        read_only_fields = fields


class LastMessageSerializer(serializers.Serializer):
    content = serializers.CharField()
    sender_id = serializers.IntegerField()
    created_at = serializers.DateTimeField()


class ConversationSerializer(serializers.ModelSerializer):
    """
    Conversation as seen by one participant.

    ``unread_count`` and ``last_message`` come from the annotations added by
    ConversationRepository.list_for_user; they are null elsewhere.
    """

    participants = serializers.SerializerMethodField()
    other_user = serializers.SerializerMethodField()
    product_id = serializers.IntegerField(read_only=True, allow_null=True)
    unread_count = serializers.SerializerMethodField()
    last_message = serializers.SerializerMethodField()

    class Meta:
        model = Conversation
        fields = (
            "id",
            "participants",
            "other_user",
            "product_id",
            "unread_count",
            "last_message",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_participants(self, obj):
        return list(obj.participant_ids)

    def get_other_user(self, obj):
        principal = self.context.get("principal")
        if principal is None:
            return None
        other = obj.user_low if principal.id == obj.user_high_id else obj.user_high
        return PublicUserSerializer(other).data

    def get_unread_count(self, obj):
        return getattr(obj, "unread_count", None)

    def get_last_message(self, obj):
        if getattr(obj, "last_message_at", None) is None:
            return None
        return LastMessageSerializer(
            {
                "content": obj.last_message_content,
                "sender_id": obj.last_message_sender_id,
                "created_at": obj.last_message_at,
            }
        ).data


class StartConversationSerializer(ConversationRequestSerializer):
    """Request body for POST /conversations/."""


class SendMessageSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=False, allow_blank=True)


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class MarkReadSerializer(serializers.Serializer):
    marked = serializers.IntegerField()
