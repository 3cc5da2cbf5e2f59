from .user_admin_service import UserAdministrationService

__all__ = ["UserAdministrationService"]
