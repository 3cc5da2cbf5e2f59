from rest_framework import serializers

from marketplace.catalog.domain.models import Category, Server


class ServerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Server
        fields = ["id", "name", "display_name"]
        read_only_fields = fields


class CategorySerializer(serializers.ModelSerializer):
    has_children = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ["id", "name", "display_name", "icon", "color", "parent", "has_children"]
        read_only_fields = fields

    def get_has_children(self, obj):
        return obj.children.exists()


class MinimalCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "display_name"]
        read_only_fields = fields
