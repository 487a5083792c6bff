"""Response envelope and shared API schemas."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from src.app.core.models import PageParams, Pagination
from src.app.entities.core.user.entity import User, UserRole

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, message?, data, pagination?}`` wrapper used by every endpoint."""

    success: bool = True
    message: str | None = None
    data: T | None = None
    pagination: Pagination | None = None


def ok(data: T | None = None, message: str | None = None) -> ApiResponse[T]:
    return ApiResponse[T](data=data, message=message)


def paginated(items: list[T], total: int, params: PageParams) -> ApiResponse[list[T]]:
    return ApiResponse[list[T]](data=items, pagination=Pagination.build(params, total))


class UserPublic(BaseModel):
    """User fields safe to return to clients."""

    id: str
    email: str
    name: str | None = None
    role: UserRole
    phone: str | None = None
    avatar: str | None = None
    created_at: datetime

    @classmethod
    def of(cls, user: User) -> "UserPublic":
        return cls.model_validate(user.model_dump())
