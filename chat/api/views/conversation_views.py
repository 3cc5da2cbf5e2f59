from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action

from chat.api.serializers import (
    ConversationSerializer,
    MarkReadSerializer,
    MessageSerializer,
    SendMessageSerializer,
    StartConversationSerializer,
)
from infrastructure.container import container
from utils.api import ErrorResponseSerializer, principal_of, result_response


ERROR_RESPONSES = {
    400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
    403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a participant or user banned"),
    404: OpenApiResponse(response=ErrorResponseSerializer, description="Conversation not found"),
}


class ConversationViewSet(viewsets.ViewSet):
    """
    GET  /api/chat/conversations/
    POST /api/chat/conversations/
    GET  /api/chat/conversations/{id}/messages/
    POST /api/chat/conversations/{id}/messages/
    POST /api/chat/conversations/{id}/mark-read/
    """

    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_service(self):
        return container.messaging_service()

    @extend_schema(responses={200: ConversationSerializer(many=True)}, tags=["Chat - Conversations"])
    def list(self, request):
        principal = principal_of(request)
        context = {"request": request, "principal": principal}
        result = self.get_service().list_conversations(principal)
        return result_response(result, lambda rows: ConversationSerializer(rows, many=True, context=context).data)

    @extend_schema(
        request=StartConversationSerializer,
        responses={
            200: OpenApiResponse(response=ConversationSerializer, description="Existing conversation"),
            201: OpenApiResponse(response=ConversationSerializer, description="Conversation created"),
            **ERROR_RESPONSES,
        },
        tags=["Chat - Conversations"],
    )
    def create(self, request):
        serializer = StartConversationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        principal = principal_of(request)
        result = self.get_service().find_or_create_conversation(
            principal,
            serializer.validated_data.get("other_user_id"),
            serializer.validated_data.get("product_id"),
        )
        if not result.ok:
            return result_response(result)
        conversation, created = result.value
        context = {"request": request, "principal": principal}
        return result_response(
            result,
            lambda _: ConversationSerializer(conversation, context=context).data,
            success_status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(
        methods=["GET"],
        responses={200: MessageSerializer(many=True), **ERROR_RESPONSES},
        tags=["Chat - Messages"],
    )
    @extend_schema(
        methods=["POST"],
        request=SendMessageSerializer,
        responses={201: MessageSerializer, **ERROR_RESPONSES},
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        principal = principal_of(request)
        if request.method == "GET":
            result = self.get_service().get_messages(principal, int(pk))
            return result_response(result, lambda rows: MessageSerializer(rows, many=True).data)

        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().send_message(principal, int(pk), serializer.validated_data["content"])
        return result_response(
            result, lambda message: MessageSerializer(message).data, success_status=status.HTTP_201_CREATED
        )

    @extend_schema(request=None, responses={200: MarkReadSerializer, **ERROR_RESPONSES}, tags=["Chat - Messages"])
    @action(detail=True, methods=["post"], url_path="mark-read")
    def mark_read(self, request, pk=None):
        result = self.get_service().mark_read(principal_of(request), int(pk))
        return result_response(result, lambda marked: {"marked": marked})
