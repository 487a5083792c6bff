"""User account services."""

from .profile_service import ProfileService
from .user_management import TokenPair, UserManagementService

__all__ = ["ProfileService", "TokenPair", "UserManagementService"]
