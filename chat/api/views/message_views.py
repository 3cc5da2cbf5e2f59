from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, viewsets
from rest_framework.decorators import action

from chat.api.serializers import (
    ModerationMessagePageSerializer,
    ModerationMessageSerializer,
    PageQuerySerializer,
    UnreadCountSerializer,
)
from infrastructure.container import container
from marketplace.permissions import IsModeratorOrAdmin
from utils.api import ErrorResponseSerializer, principal_of, result_response


class MessageViewSet(viewsets.ViewSet):
    """
    GET   /api/chat/messages/unread-count/
    GET   /api/chat/messages/pending/          (moderator/admin)
    PATCH /api/chat/messages/{id}/moderate/    (moderator/admin)
    """

    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_service(self):
        return container.messaging_service()

    def get_permissions(self):
        if self.action == "pending":
            return [permissions.IsAuthenticated(), IsModeratorOrAdmin()]
        return super().get_permissions()

    @extend_schema(responses={200: UnreadCountSerializer}, tags=["Chat - Messages"])
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        result = self.get_service().unread_count(principal_of(request))
        return result_response(result, lambda count: {"unread_count": count})

    @extend_schema(
        parameters=[
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page"),
        ],
        responses={200: ModerationMessagePageSerializer},
        tags=["Chat - Moderation"],
    )
    @action(detail=False, methods=["get"])
    def pending(self, request):
        query = PageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = self.get_service().list_pending_messages(
            principal_of(request), query.validated_data["page"], query.validated_data.get("page_size")
        )
        return result_response(
            result,
            lambda page: {**page, "results": ModerationMessageSerializer(page["results"], many=True).data},
        )

    @extend_schema(
        request=None,
        responses={
            200: ModerationMessageSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a moderator"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Message not found"),
        },
        tags=["Chat - Moderation"],
    )
    @action(detail=True, methods=["patch"])
    def moderate(self, request, pk=None):
        result = self.get_service().moderate_message(principal_of(request), int(pk))
        return result_response(result, lambda message: ModerationMessageSerializer(message).data)
