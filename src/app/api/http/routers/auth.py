"""Cookie-based authentication and admin user management endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel, EmailStr, Field
from sqlmodel import Session

from src.app.api.http.deps import (
    get_current_user,
    get_db_session,
    get_user_management_service,
    require_admin,
)
from src.app.api.http.middleware.limiter import rate_limit
from src.app.api.http.schemas import ApiResponse, UserPublic, ok, paginated
from src.app.core.models import PageParams
from src.app.core.services import UserManagementService
from src.app.core.services.user.user_management import TokenPair
from src.app.entities.core.user import User, UserRole
from src.app.runtime.context import get_config

router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])

# Brute-force protection on credential endpoints
auth_rate_limit = rate_limit(10, 15 * 60 * 1000)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)


class RoleUpdateRequest(BaseModel):
    role: UserRole


def _cookie_settings() -> dict[str, Any]:
    """httpOnly cookie attributes; ``secure`` only outside development."""
    config = get_config()
    return {
        "httponly": True,
        "secure": config.security.secure_cookies and config.app.environment == "production",
        "samesite": config.security.cookie_samesite,
        "path": "/",
    }


def _set_auth_cookies(response: Response, pair: TokenPair) -> None:
    config = get_config()
    settings = _cookie_settings()
    response.set_cookie(
        config.security.access_cookie_name,
        pair.access_token,
        max_age=config.jwt.access_token_ttl_seconds,
        **settings,
    )
    response.set_cookie(
        config.security.refresh_cookie_name,
        pair.refresh_token,
        max_age=config.jwt.refresh_token_ttl_seconds,
        **settings,
    )


def _clear_auth_cookies(response: Response) -> None:
    config = get_config()
    response.delete_cookie(config.security.access_cookie_name, path="/")
    response.delete_cookie(config.security.refresh_cookie_name, path="/")


@router.post(
    "/register",
    status_code=201,
    response_model=ApiResponse[UserPublic],
    dependencies=[Depends(auth_rate_limit)],
)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_db_session),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[UserPublic]:
    user = users.register(payload.email, payload.password, payload.name)
    session.commit()
    return ok(UserPublic.of(user), "User registered successfully")


@router.post(
    "/login", response_model=ApiResponse[UserPublic], dependencies=[Depends(auth_rate_limit)]
)
def login(
    payload: LoginRequest,
    response: Response,
    session: Session = Depends(get_db_session),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[UserPublic]:
    pair = users.login(payload.email, payload.password)
    session.commit()
    _set_auth_cookies(response, pair)
    return ok(UserPublic.of(pair.user), "Login successful")


@router.post("/refresh", response_model=ApiResponse[UserPublic])
def refresh(
    request: Request,
    response: Response,
    session: Session = Depends(get_db_session),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[UserPublic]:
    pair = users.refresh(request.cookies.get(get_config().security.refresh_cookie_name))
    session.commit()
    _set_auth_cookies(response, pair)
    return ok(UserPublic.of(pair.user), "Token refreshed")


@router.post("/logout", response_model=ApiResponse[None])
def logout(
    response: Response,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[None]:
    users.logout(user.id)
    session.commit()
    _clear_auth_cookies(response)
    return ok(message="Logged out successfully")


@router.get("/me", response_model=ApiResponse[UserPublic])
def me(user: User = Depends(get_current_user)) -> ApiResponse[UserPublic]:
    return ok(UserPublic.of(user))


@router.post("/change-password", response_model=ApiResponse[None])
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[None]:
    users.change_password(user.id, payload.current_password, payload.new_password)
    session.commit()
    return ok(message="Password changed successfully")


# --- Admin user management ---


@users_router.get("", response_model=ApiResponse[list[UserPublic]])
def list_users(
    page: int = Query(1),
    limit: int = Query(10),
    _: User = Depends(require_admin),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[list[UserPublic]]:
    params = PageParams.of(page, limit)
    items, total = users.list_users(params)
    return paginated([UserPublic.of(u) for u in items], total, params)


@users_router.get("/{user_id}", response_model=ApiResponse[UserPublic])
def get_user(
    user_id: str,
    _: User = Depends(require_admin),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[UserPublic]:
    return ok(UserPublic.of(users.get_user(user_id)))


@users_router.patch("/{user_id}/role", response_model=ApiResponse[UserPublic])
def update_role(
    user_id: str,
    payload: RoleUpdateRequest,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[UserPublic]:
    user = users.update_role(user_id, payload.role)
    session.commit()
    return ok(UserPublic.of(user), "Role updated")


@users_router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(
    user_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
    users: UserManagementService = Depends(get_user_management_service),
) -> ApiResponse[None]:
    users.delete_user(user_id)
    session.commit()
    return ok(message="User deleted")
