from prometheus_client import Counter, Gauge


# Messaging metrics
messages_sent_total = Counter("chat_messages_sent_total", "Total messages sent")
conversations_created_total = Counter(
    "chat_conversations_created_total", "Conversations created", ["anchored"]
)
conversation_races_total = Counter(
    "chat_conversation_races_total", "Concurrent conversation creations resolved to the existing row"
)

# Moderation metrics
messages_moderated_total = Counter("chat_messages_moderated_total", "Messages flagged as moderated")
pending_messages = Gauge("chat_pending_messages", "Messages awaiting moderation")

# Authorization
authorization_denials_total = Counter(
    "chat_authorization_denials_total", "Chat operations refused for role, participation or ban", ["operation"]
)
