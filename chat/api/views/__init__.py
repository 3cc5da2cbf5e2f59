from .conversation_views import ConversationViewSet
from .message_views import MessageViewSet


__all__ = ["ConversationViewSet", "MessageViewSet"]
