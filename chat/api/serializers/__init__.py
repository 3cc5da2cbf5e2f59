from .conversation_serializers import (
    ConversationSerializer,
    MarkReadSerializer,
    MessageSerializer,
    SendMessageSerializer,
    StartConversationSerializer,
    UnreadCountSerializer,
)
from .moderation_serializers import ModerationMessagePageSerializer, ModerationMessageSerializer, PageQuerySerializer


__all__ = [
    "ConversationSerializer",
    "MarkReadSerializer",
    "MessageSerializer",
    "ModerationMessagePageSerializer",
    "ModerationMessageSerializer",
    "PageQuerySerializer",
    "SendMessageSerializer",
    "StartConversationSerializer",
    "UnreadCountSerializer",
]
