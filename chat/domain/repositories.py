"""
Persistence access for conversations and messages.

Conversation creation is insert-then-fetch: the partial unique constraints
on the ordered participant pair decide which of two concurrent inserts wins,
and the loser reads the winner's row.
"""

import logging
from typing import Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import Count, OuterRef, Q, QuerySet, Subquery
from django.utils import timezone

from chat.domain.models import Conversation, Message


logger = logging.getLogger(__name__)


class ConversationRepository:
    def get(self, conversation_id) -> Optional[Conversation]:
        return Conversation.objects.filter(pk=conversation_id).first()

    def find(self, user_low_id, user_high_id, product_id=None) -> Optional[Conversation]:
        qs = Conversation.objects.filter(user_low_id=user_low_id, user_high_id=user_high_id)
        if product_id is None:
            qs = qs.filter(product__isnull=True)
        else:
            qs = qs.filter(product_id=product_id)
        return qs.first()

    def insert(self, user_low_id, user_high_id, product_id=None) -> Tuple[Optional[Conversation], bool]:
        """
        Create the conversation inside a savepoint.

        Returns ``(conversation, created)``. On a unique-constraint conflict
        the existing row is returned with ``created=False``; ``conversation``
        is None only if that row cannot be read back.
        """
        try:
            with transaction.atomic():
                conversation = Conversation.objects.create(
                    user_low_id=user_low_id, user_high_id=user_high_id, product_id=product_id
                )
            return conversation, True
        except IntegrityError:
            logger.info(f"Conversation ({user_low_id}, {user_high_id}, {product_id}) created concurrently")
            return self.find(user_low_id, user_high_id, product_id), False

    def touch(self, conversation_id) -> int:
        return Conversation.objects.filter(pk=conversation_id).update(updated_at=timezone.now())

    def list_for_user(self, user_id) -> QuerySet:
        """Conversations the user takes part in, most recently active first.

        Each row is annotated with ``unread_count`` (incoming, unread) and the
        last message's content, sender and timestamp.
        """
        last_message = Message.objects.filter(conversation=OuterRef("pk")).order_by("-created_at", "-id")
        return (
            Conversation.objects.filter(Q(user_low_id=user_id) | Q(user_high_id=user_id))
            .select_related("user_low", "user_high")
            .annotate(
                unread_count=Count(
                    "messages",
                    filter=Q(messages__read_at__isnull=True) & ~Q(messages__sender_id=user_id),
                ),
                last_message_content=Subquery(last_message.values("content")[:1]),
                last_message_sender_id=Subquery(last_message.values("sender_id")[:1]),
                last_message_at=Subquery(last_message.values("created_at")[:1]),
            )
            .order_by("-updated_at", "-id")
        )


class MessageRepository:
    def _base(self) -> QuerySet:
        return Message.objects.select_related(
            "sender",
            "conversation",
            "conversation__user_low",
            "conversation__user_high",
            "conversation__product",
        )

    def get(self, message_id) -> Optional[Message]:
        return self._base().filter(pk=message_id).first()

    def insert(self, conversation_id, sender_id, content) -> Message:
        return Message.objects.create(conversation_id=conversation_id, sender_id=sender_id, content=content)

    def list_pending(self) -> QuerySet:
        return self._base().filter(is_moderated=False).order_by("created_at", "id")

    def list_for_conversation(self, conversation_id) -> QuerySet:
        return Message.objects.filter(conversation_id=conversation_id).select_related("sender").order_by(
            "created_at", "id"
        )

    def moderate(self, message_id, moderator_id) -> int:
        """Flip the flag only if it is still false; returns rows changed (0 or 1)."""
        return Message.objects.filter(pk=message_id, is_moderated=False).update(
            is_moderated=True, moderator_id=moderator_id, moderated_at=timezone.now()
        )

    def mark_read(self, conversation_id, reader_id) -> int:
        return (
            Message.objects.filter(conversation_id=conversation_id, read_at__isnull=True)
            .exclude(sender_id=reader_id)
            .update(read_at=timezone.now())
        )

    def unread_count(self, user_id) -> int:
        return (
            Message.objects.filter(
                Q(conversation__user_low_id=user_id) | Q(conversation__user_high_id=user_id),
                read_at__isnull=True,
            )
            .exclude(sender_id=user_id)
            .count()
        )
