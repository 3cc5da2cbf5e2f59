"""
MessagingService - conversations, messages and message moderation.

Participation in a conversation grants send and read rights; moderators and
admins flag messages as reviewed. The moderation flag is one-way.
"""

from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction

from chat.domain.inputs import ConversationRequestSerializer
from chat.domain.models import Conversation, Message
from chat.domain.repositories import ConversationRepository, MessageRepository
from chat.infra.observability.metrics import (
    authorization_denials_total,
    conversation_races_total,
    conversations_created_total,
    messages_moderated_total,
    messages_sent_total,
    pending_messages,
)
from infrastructure.container import container
from infrastructure.notifications import CONVERSATIONS, MESSAGES_PENDING
from marketplace.catalog.domain.repositories import ListingRepository, ReferenceValidator
from utils.pagination import marketplace_setting, paginate
from utils.rbac import Principal, can_moderate, is_participant, require_not_banned, require_staff
from utils.service_base import (
    AuthorizationError,
    BaseService,
    ConflictError,
    ErrorCodes,
    ErrorKind,
    NotFoundError,
    ReferenceNotFoundError,
    ServiceError,
    ServiceResult,
    ValidationError,
    service_fail,
    service_ok,
)
from utils.validation import validate_input


MAX_MESSAGE_LENGTH = 4000


class MessagingService(BaseService):
    """
    Service for two-party conversations.

    Responsibilities:
    - Find or create the conversation for a pair of users (optionally about a listing)
    - Send messages and track read state
    - Moderation queue and the one-way moderation flag
    """

    def __init__(self, conversations=None, messages=None, references=None, listings=None, notifier=None):
        super().__init__()
        self.conversations = conversations or ConversationRepository()
        self.messages = messages or MessageRepository()
        self.references = references or ReferenceValidator()
        self.listings = listings or ListingRepository()
        self.notifier = notifier or container.notifier()

    @BaseService.log_performance
    @transaction.atomic
    def send_message(self, principal: Optional[Principal], conversation_id: int, content) -> ServiceResult[Message]:
        try:
            require_not_banned(principal)
            conversation = self._get_conversation(conversation_id)
            if not is_participant(principal, conversation):
                raise AuthorizationError("Only conversation participants can send messages.")

            if not isinstance(content, str) or not content.strip():
                raise ValidationError.for_fields({"content": ["Message may not be blank."]}, "Invalid message")
            content = content.strip()
            if len(content) > MAX_MESSAGE_LENGTH:
                raise ValidationError.for_fields(
                    {"content": [f"Ensure this field has no more than {MAX_MESSAGE_LENGTH} characters."]},
                    "Invalid message",
                )

            message = self.messages.insert(conversation.pk, principal.id, content)
            self.conversations.touch(conversation.pk)

            messages_sent_total.inc()
            self.notifier.notify_on_commit(
                [MESSAGES_PENDING, CONVERSATIONS],
                {
                    "event_type": "message.sent",
                    "aggregate_id": message.pk,
                    "conversation_id": conversation.pk,
                    "participant_ids": list(conversation.participant_ids),
                },
            )
            # Never log message content
            self.logger.info(f"Message {message.pk} sent in conversation {conversation.pk} by {principal.id}")
            return service_ok(message)
        except ServiceError as e:
            return self._fail("send_message", e)

    @BaseService.log_performance
    @transaction.atomic
    def find_or_create_conversation(
        self, principal: Optional[Principal], other_user_id, product_id=None
    ) -> ServiceResult[Tuple[Conversation, bool]]:
        """
        Upsert the conversation between the principal and another user.

        The natural key is the unordered pair plus the optional listing, so
        calls from either side return the same row, including under races.

        Returns:
            ServiceResult with ``(conversation, created)``
        """
        try:
            require_not_banned(principal)

            request = validate_input(
                ConversationRequestSerializer,
                {"other_user_id": other_user_id, "product_id": product_id},
                "Invalid conversation request",
            )
            other_user_id = request.get("other_user_id")
            product_id = request.get("product_id")

            if product_id is not None:
                listing = self.listings.get(product_id)
                if listing is None:
                    raise ReferenceNotFoundError(
                        f"Listing {product_id} does not exist", fields={"product_id": ["Unknown listing."]}
                    )
                if other_user_id is None:
                    # Contact seller
                    other_user_id = listing.owner_id
            if other_user_id == principal.id:
                raise ValidationError.for_fields(
                    {"other_user_id": ["You cannot start a conversation with yourself."]},
                    "Invalid conversation request",
                )

            if not self.references.user_exists(other_user_id):
                raise ReferenceNotFoundError(
                    f"User {other_user_id} does not exist", fields={"other_user_id": ["Unknown user."]}
                )

            user_low_id, user_high_id = Conversation.ordered_pair(principal.id, other_user_id)
            existing = self.conversations.find(user_low_id, user_high_id, product_id)
            if existing is not None:
                return service_ok((existing, False))

            conversation, created = self.conversations.insert(user_low_id, user_high_id, product_id)
            if conversation is None:
                raise ConflictError("Conversation could not be created, retry the request")

            if created:
                conversations_created_total.labels(anchored="yes" if product_id else "no").inc()
                self.notifier.notify_on_commit(
                    [CONVERSATIONS],
                    {
                        "event_type": "conversation.created",
                        "aggregate_id": conversation.pk,
                        "participant_ids": [user_low_id, user_high_id],
                        "product_id": product_id,
                    },
                )
            else:
                conversation_races_total.inc()
            return service_ok((conversation, created))
        except ServiceError as e:
            return self._fail("find_or_create_conversation", e)

    @BaseService.log_performance
    def list_pending_messages(
        self, principal: Optional[Principal], page: int = 1, page_size: Optional[int] = None
    ) -> ServiceResult[Dict[str, Any]]:
        """All unmoderated messages system-wide, oldest first, with sender and conversation context."""
        try:
            require_staff(principal)
            page_data = paginate(
                self.messages.list_pending(), page, page_size, marketplace_setting("PENDING_PAGE_SIZE", 50)
            )
            pending_messages.set(page_data["count"])
            return service_ok(page_data)
        except ServiceError as e:
            return self._fail("list_pending_messages", e)

    @BaseService.log_performance
    @transaction.atomic
    def moderate_message(self, principal: Optional[Principal], message_id: int) -> ServiceResult[Message]:
        """
        Flag a message as moderated.

        Repeating the call succeeds and keeps the first moderator on record.
        """
        try:
            require_not_banned(principal)
            if not can_moderate(principal):
                raise AuthorizationError("Only moderators and admins can moderate messages.")

            updated = self.messages.moderate(message_id, principal.id)
            message = self.messages.get(message_id)
            if message is None:
                raise NotFoundError(f"Message {message_id} not found", code=ErrorCodes.MESSAGE_NOT_FOUND)

            if updated:
                messages_moderated_total.inc()
                self.notifier.notify_on_commit(
                    [MESSAGES_PENDING],
                    {"event_type": "message.moderated", "aggregate_id": message.pk, "actor_id": principal.id},
                )
                self.logger.info(f"Message {message_id} moderated by {principal.id}")
            return service_ok(message)
        except ServiceError as e:
            return self._fail("moderate_message", e)

    @BaseService.log_performance
    @transaction.atomic
    def mark_read(self, principal: Optional[Principal], conversation_id: int) -> ServiceResult[int]:
        """Stamp ``read_at`` on every unread incoming message. Returns how many were marked."""
        try:
            conversation = self._get_participant_conversation(principal, conversation_id)
            marked = self.messages.mark_read(conversation.pk, principal.id)
            if marked:
                self.notifier.notify_on_commit(
                    [CONVERSATIONS],
                    {"event_type": "conversation.read", "aggregate_id": conversation.pk, "actor_id": principal.id},
                )
            return service_ok(marked)
        except ServiceError as e:
            return self._fail("mark_read", e)

    @BaseService.log_performance
    def list_conversations(self, principal: Optional[Principal]) -> ServiceResult[List[Conversation]]:
        try:
            if principal is None:
                raise AuthorizationError("Authentication required.")
            return service_ok(list(self.conversations.list_for_user(principal.id)))
        except ServiceError as e:
            return service_fail(e)

    @BaseService.log_performance
    def unread_count(self, principal: Optional[Principal]) -> ServiceResult[int]:
        try:
            if principal is None:
                raise AuthorizationError("Authentication required.")
            return service_ok(self.messages.unread_count(principal.id))
        except ServiceError as e:
            return service_fail(e)

    @BaseService.log_performance
    @transaction.atomic
    def get_messages(self, principal: Optional[Principal], conversation_id: int) -> ServiceResult[List[Message]]:
        """Messages of a conversation, oldest first. Viewing marks incoming messages read."""
        try:
            conversation = self._get_participant_conversation(principal, conversation_id)
            self.messages.mark_read(conversation.pk, principal.id)
            return service_ok(list(self.messages.list_for_conversation(conversation.pk)))
        except ServiceError as e:
            return self._fail("get_messages", e)

    def _get_conversation(self, conversation_id) -> Conversation:
        conversation = self.conversations.get(conversation_id)
        if conversation is None:
            raise NotFoundError(
                f"Conversation {conversation_id} not found", code=ErrorCodes.CONVERSATION_NOT_FOUND
            )
        return conversation

    def _get_participant_conversation(self, principal: Optional[Principal], conversation_id) -> Conversation:
        if principal is None:
            raise AuthorizationError("Authentication required.")
        conversation = self._get_conversation(conversation_id)
        if not is_participant(principal, conversation):
            raise AuthorizationError("Only conversation participants can read this conversation.")
        return conversation

    def _fail(self, operation: str, exc: ServiceError) -> ServiceResult:
        if exc.kind == ErrorKind.AUTHORIZATION:
            authorization_denials_total.labels(operation=operation).inc()
        return service_fail(exc)
