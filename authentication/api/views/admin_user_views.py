from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, viewsets
from rest_framework.decorators import action

from authentication.api.serializers import AdminUserSerializer, BanSerializer, RoleUpdateSerializer
from infrastructure.container import container
from utils.api import ErrorResponseSerializer, principal_of, result_response


def _serialize_user(user):
    return AdminUserSerializer(user).data


class AdminUserViewSet(viewsets.ViewSet):
    """
    Staff-only user administration.

    GET   /api/auth/admin/users/
    PATCH /api/auth/admin/users/{id}/role/
    PATCH /api/auth/admin/users/{id}/ban/
    PATCH /api/auth/admin/users/{id}/unban/
    """

    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_service(self):
        return container.user_admin_service()

    @extend_schema(responses={200: AdminUserSerializer(many=True)}, tags=["Admin - Users"])
    def list(self, request):
        result = self.get_service().list_users(principal_of(request))
        return result_response(result, lambda users: AdminUserSerializer(users, many=True).data)

    @extend_schema(
        request=RoleUpdateSerializer,
        responses={200: AdminUserSerializer, 403: OpenApiResponse(response=ErrorResponseSerializer)},
        tags=["Admin - Users"],
    )
    @action(detail=True, methods=["patch"])
    def role(self, request, pk=None):
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().set_role(principal_of(request), int(pk), serializer.validated_data["role"])
        return result_response(result, _serialize_user)

    @extend_schema(request=BanSerializer, responses={200: AdminUserSerializer}, tags=["Admin - Users"])
    @action(detail=True, methods=["patch"])
    def ban(self, request, pk=None):
        serializer = BanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().ban_user(principal_of(request), int(pk), serializer.validated_data.get("reason"))
        return result_response(result, _serialize_user)

    @extend_schema(request=None, responses={200: AdminUserSerializer}, tags=["Admin - Users"])
    @action(detail=True, methods=["patch"])
    def unban(self, request, pk=None):
        result = self.get_service().unban_user(principal_of(request), int(pk))
        return result_response(result, _serialize_user)
