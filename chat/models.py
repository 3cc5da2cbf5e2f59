from chat.domain.models import Conversation, Message


__all__ = [
    "Conversation",
    "Message",
]
