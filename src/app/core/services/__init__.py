"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService, get_db_service

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

# User Services
from .user.profile_service import ProfileService
from .user.user_management import UserManagementService

__all__ = [
    # Database Service
    "DbSessionService",
    "get_db_service",
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
    # User Services
    "ProfileService",
    "UserManagementService",
]
