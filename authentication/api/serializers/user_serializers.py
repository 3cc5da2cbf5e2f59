from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from authentication.domain.models import CustomUser


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = (
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "profile_image_url",
            "role",
            "is_banned",
            "date_joined",
        )
        read_only_fields = fields


class AdminUserSerializer(UserSerializer):
    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ("ban_reason", "updated_at")
        read_only_fields = fields


class PublicUserSerializer(serializers.ModelSerializer):
    """Minimal sender/owner projection embedded in listings and messages."""

    class Meta:
        model = CustomUser
        fields = ("id", "username", "first_name", "last_name", "profile_image_url")
        read_only_fields = fields


class UserRegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)

    class Meta:
        model = CustomUser
        fields = ("username", "email", "first_name", "last_name", "password", "password_confirm")

    def validate(self, attrs):
        if attrs["password"] != attrs["password_confirm"]:
            raise serializers.ValidationError({"password_confirm": "Passwords don't match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop("password_confirm")
        password = validated_data.pop("password")
        return CustomUser.objects.create_user(password=password, **validated_data)


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.CharField()


class BanSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
