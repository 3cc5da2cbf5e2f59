from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, viewsets
from rest_framework.permissions import AllowAny

from marketplace.catalog.api.serializers import CategorySerializer, ServerSerializer
from marketplace.catalog.domain.repositories import ReferenceValidator


class ServerViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [AllowAny]
    serializer_class = ServerSerializer
    pagination_class = None

    def get_queryset(self):
        return ReferenceValidator().list_servers()


class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    """Root categories by default; ``?parent=<id>`` lists that category's subcategories."""

    permission_classes = [AllowAny]
    serializer_class = CategorySerializer
    pagination_class = None

    def get_queryset(self):
        references = ReferenceValidator()
        if self.action != "list":
            return references.list_all_categories()
        parent = self.request.query_params.get("parent")
        if parent in (None, ""):
            return references.list_categories()
        try:
            return references.list_categories(int(parent))
        except ValueError:
            raise serializers.ValidationError({"parent": ["A valid integer is required."]})

    @extend_schema(
        parameters=[OpenApiParameter(name="parent", type=int, description="List subcategories of this category")],
        tags=["Marketplace - Reference data"],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
