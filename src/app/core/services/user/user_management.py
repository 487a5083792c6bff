"""Account registration, cookie token issuance and admin user management."""

from dataclasses import dataclass

from loguru import logger
from sqlmodel import Session

from src.app.core.errors import AuthenticationError, NotFoundError, ValidationError
from src.app.core.models import PageParams
from src.app.core.security import generate_refresh_token, hash_password, verify_password
from src.app.core.services.jwt.jwt_gen import JwtGeneratorService
from src.app.entities.core.user.entity import User, UserRole
from src.app.entities.core.user.repository import UserRepository
from src.app.runtime.context import get_config

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class TokenPair:
    """Tokens issued at login and on refresh."""

    access_token: str
    refresh_token: str
    user: User


class UserManagementService:
    def __init__(
        self,
        db_session: Session,
        jwt_service: JwtGeneratorService | None = None,
    ):
        self._jwt_service = jwt_service or JwtGeneratorService()
        self._user_repo = UserRepository(db_session)
        self._db_session = db_session

    def register(self, email: str, password: str, name: str | None = None) -> User:
        """Create a USER account with a hashed password."""
        min_length = get_config().security.password_min_length
        if len(password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")
        if self._user_repo.get_by_email(email) is not None:
            raise ValidationError("User already exists")

        user = self._user_repo.create(
            User(
                email=email.strip().lower(),
                password_hash=hash_password(password),
                name=name,
                role=UserRole.USER,
            )
        )
        logger.bind(user_id=user.id).info("user.registered")
        return user

    def login(self, email: str, password: str) -> TokenPair:
        user = self._user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.bind(email=email).info("auth.login_failed")
            raise ValidationError(INVALID_CREDENTIALS)

        pair = self._issue_tokens(user)
        logger.bind(user_id=user.id).info("auth.login")
        return pair

    def refresh(self, refresh_token: str | None) -> TokenPair:
        """Rotate both tokens for the holder of a valid refresh token."""
        if not refresh_token:
            raise AuthenticationError("Refresh token is missing")
        user = self._user_repo.get_by_refresh_token(refresh_token)
        if user is None:
            raise AuthenticationError("Invalid refresh token")
        return self._issue_tokens(user)

    def logout(self, user_id: str) -> None:
        user = self._user_repo.get(user_id)
        if user is None:
            return
        user.refresh_token = None
        self._user_repo.update(user)
        logger.bind(user_id=user_id).info("auth.logout")

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        user = self._require_user(user_id)
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        min_length = get_config().security.password_min_length
        if len(new_password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")
        user.password_hash = hash_password(new_password)
        self._user_repo.update(user)
        logger.bind(user_id=user_id).info("auth.password_changed")

    def _issue_tokens(self, user: User) -> TokenPair:
        access_token = self._jwt_service.generate_access_token(
            user_id=user.id, email=user.email, role=user.role.value
        )
        user.refresh_token = generate_refresh_token()
        user = self._user_repo.update(user)
        return TokenPair(
            access_token=access_token,
            refresh_token=user.refresh_token or "",
            user=user,
        )

    # Admin user management

    def list_users(self, params: PageParams) -> tuple[list[User], int]:
        return self._user_repo.list_page(params.offset, params.limit)

    def get_user(self, user_id: str) -> User:
        return self._require_user(user_id)

    def update_role(self, user_id: str, role: UserRole) -> User:
        user = self._require_user(user_id)
        user.role = role
        updated = self._user_repo.update(user)
        logger.bind(user_id=user_id, role=role.value).info("user.role_changed")
        return updated

    def promote(self, email: str) -> User:
        user = self._user_repo.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return self.update_role(user.id, UserRole.ADMIN)

    def delete_user(self, user_id: str) -> None:
        if not self._user_repo.delete(user_id):
            raise NotFoundError("User not found")
        logger.bind(user_id=user_id).info("user.deleted")

    def _require_user(self, user_id: str) -> User:
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
