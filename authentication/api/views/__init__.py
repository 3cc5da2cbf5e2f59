from .admin_user_views import AdminUserViewSet
from .auth_views import CurrentUserView, RegisterAPIView

__all__ = ["AdminUserViewSet", "CurrentUserView", "RegisterAPIView"]
