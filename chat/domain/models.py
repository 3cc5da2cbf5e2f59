from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Conversation(models.Model):
    """
    A two-party thread, optionally about one listing.

    Participants are stored as an ordered pair (``user_low_id < user_high_id``)
    so the unordered pair plus the listing anchor has exactly one row.
    """

    user_low = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="conversations_as_low"
    )
    user_high = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="conversations_as_high"
    )
    # No database constraint: conversation history outlives a deleted listing
    product = models.ForeignKey(
        "marketplace.Listing",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "chat"
        ordering = ["-updated_at"]
        constraints = [
            models.CheckConstraint(condition=Q(user_low__lt=F("user_high")), name="chat_conversation_ordered_pair"),
            models.UniqueConstraint(
                fields=["user_low", "user_high", "product"],
                condition=Q(product__isnull=False),
                name="chat_conversation_pair_product_uniq",
            ),
            models.UniqueConstraint(
                fields=["user_low", "user_high"],
                condition=Q(product__isnull=True),
                name="chat_conversation_pair_uniq",
            ),
        ]
        indexes = [
            models.Index(fields=["user_low", "-updated_at"], name="conversation_low_updated_idx"),
            models.Index(fields=["user_high", "-updated_at"], name="conversation_high_updated_idx"),
        ]

    @staticmethod
    def ordered_pair(first_user_id, second_user_id):
        return (first_user_id, second_user_id) if first_user_id < second_user_id else (second_user_id, first_user_id)

    @property
    def participant_ids(self):
        return (self.user_low_id, self.user_high_id)

    def __str__(self):
        anchor = f" about listing {self.product_id}" if self.product_id else ""
        return f"Conversation between {self.user_low_id} and {self.user_high_id}{anchor}"


class Message(models.Model):
    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="chat_messages")
    content = models.TextField()

    # Moderation flag only ever flips false -> true
    is_moderated = models.BooleanField(default=False)
    moderator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="moderated_messages",
    )
    moderated_at = models.DateTimeField(null=True, blank=True)

    # Set when the recipient views the message
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "chat"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["conversation", "created_at"], name="message_conv_created_idx"),
            models.Index(fields=["is_moderated", "created_at"], name="message_pending_idx"),  # Moderation queue
            models.Index(fields=["conversation", "read_at"], name="message_conv_read_idx"),  # Unread counts
        ]

    def __str__(self):
        return f"Message {self.pk} from {self.sender_id} in conversation {self.conversation_id}"
