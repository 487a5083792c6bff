"""Unit tests for registration, login and admin user management."""

import pytest

from src.app.core.errors import AuthenticationError, NotFoundError, ValidationError
from src.app.core.models import PageParams
from src.app.core.services.jwt.jwt_verify import JwtVerificationService
from src.app.core.services.user.user_management import UserManagementService
from src.app.entities.core.user import UserRole
from tests.fixtures.commerce import PASSWORD


class TestRegistration:
    def test_register_normalizes_email(self, session):
        user = UserManagementService(session).register(" New@Example.COM ", "secret123", "New")

        assert user.email == "new@example.com"
        assert user.role == UserRole.USER
        assert user.password_hash != "secret123"

    def test_short_password(self, session):
        with pytest.raises(ValidationError, match="at least 6 characters"):
            UserManagementService(session).register("short@example.com", "abc")

    def test_duplicate_email(self, session, user):
        with pytest.raises(ValidationError, match="User already exists"):
            UserManagementService(session).register(user.email.upper(), "secret123")


class TestLogin:
    def test_login_issues_verifiable_tokens(self, session, user):
        pair = UserManagementService(session).login(user.email, PASSWORD)

        claims = JwtVerificationService().verify_jwt(pair.access_token)
        assert claims.sub == user.id
        assert claims.role == "USER"
        assert pair.refresh_token
        assert pair.user.refresh_token == pair.refresh_token

    def test_wrong_password(self, session, user):
        with pytest.raises(ValidationError, match="Invalid email or password"):
            UserManagementService(session).login(user.email, "not-the-password")

    def test_refresh_rotates_token(self, session, user):
        service = UserManagementService(session)
        first = service.login(user.email, PASSWORD)

        second = service.refresh(first.refresh_token)

        assert second.refresh_token != first.refresh_token
        with pytest.raises(AuthenticationError):
            service.refresh(first.refresh_token)

    def test_refresh_without_token(self, session):
        with pytest.raises(AuthenticationError, match="missing"):
            UserManagementService(session).refresh(None)

    def test_logout_revokes_refresh_token(self, session, user):
        service = UserManagementService(session)
        pair = service.login(user.email, PASSWORD)

        service.logout(user.id)

        with pytest.raises(AuthenticationError):
            service.refresh(pair.refresh_token)

    def test_change_password(self, session, user):
        service = UserManagementService(session)
        with pytest.raises(ValidationError, match="Current password is incorrect"):
            service.change_password(user.id, "wrong", "newsecret")

        service.change_password(user.id, PASSWORD, "newsecret")
        assert service.login(user.email, "newsecret").user.id == user.id


class TestAdministration:
    def test_promote(self, session, user):
        promoted = UserManagementService(session).promote(user.email)
        assert promoted.role == UserRole.ADMIN
        assert promoted.is_admin

    def test_promote_unknown(self, session):
        with pytest.raises(NotFoundError):
            UserManagementService(session).promote("ghost@example.com")

    def test_list_and_delete(self, session, user, admin):
        service = UserManagementService(session)
        users, total = service.list_users(PageParams.of(1, 10))
        assert total == 2
        assert {u.email for u in users} == {user.email, admin.email}

        service.delete_user(user.id)
        with pytest.raises(NotFoundError):
            service.get_user(user.id)
