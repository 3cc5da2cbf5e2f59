from .user_serializers import (
    AdminUserSerializer,
    BanSerializer,
    PublicUserSerializer,
    RoleUpdateSerializer,
    UserRegistrationSerializer,
    UserSerializer,
)

__all__ = [
    "UserSerializer",
    "AdminUserSerializer",
    "PublicUserSerializer",
    "UserRegistrationSerializer",
    "RoleUpdateSerializer",
    "BanSerializer",
]
