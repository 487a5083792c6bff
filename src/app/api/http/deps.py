"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.app.api.http.app_data import ApplicationDependencies
from src.app.core.errors import AuthenticationError, PermissionDeniedError
from src.app.core.services import (
    JwtGeneratorService,
    JwtVerificationService,
    UserManagementService,
)
from src.app.core.services.email import EmailClient
from src.app.core.services.payments import PaymentService, PayPalClient, StripeClient
from src.app.entities.core.user import User, UserRepository
from src.app.runtime.context import get_config


def _app_deps(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a request-scoped session; routers commit, errors roll back."""
    session = _app_deps(request).database_service.get_session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_jwt_generation_service(request: Request) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    return _app_deps(request).jwt_generation_service


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return _app_deps(request).jwt_verify_service


def get_paypal_client(request: Request) -> PayPalClient:
    return _app_deps(request).paypal_client


def get_stripe_client(request: Request) -> StripeClient:
    return _app_deps(request).stripe_client


def get_email_client(request: Request) -> EmailClient:
    return _app_deps(request).email_client


def get_user_management_service(
    db_session: Session = Depends(get_db_session),
    jwt_service: JwtGeneratorService = Depends(get_jwt_generation_service),
) -> UserManagementService:
    """Get the User Management service instance."""
    return UserManagementService(db_session, jwt_service)


def get_payment_service(
    db_session: Session = Depends(get_db_session),
    paypal: PayPalClient = Depends(get_paypal_client),
    stripe: StripeClient = Depends(get_stripe_client),
) -> PaymentService:
    return PaymentService(db_session, paypal=paypal, stripe=stripe)


def _extract_access_token(request: Request) -> str | None:
    token = request.cookies.get(get_config().security.access_cookie_name)
    if token:
        return token
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db_session),
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> User:
    """Authenticate via the access token cookie, falling back to a Bearer header."""
    token = _extract_access_token(request)
    if not token:
        raise AuthenticationError("Access token is missing")

    claims = jwt_verify.verify_jwt(token)
    user = UserRepository(db).get(claims.sub)
    if user is None:
        raise AuthenticationError("Invalid or expired access token")

    request.state.claims = claims
    request.state.uid = user.id
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return user
