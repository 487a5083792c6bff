"""User database table model."""

from sqlmodel import Field

from src.app.entities.core._base import EntityTable
from src.app.entities.core.user.entity import UserRole


class UserTable(EntityTable, table=True):
    """Database persistence model for users."""

    __tablename__ = "users"

    email: str = Field(index=True, unique=True)
    password_hash: str
    name: str | None = None
    role: UserRole = Field(default=UserRole.USER)
    refresh_token: str | None = Field(default=None, index=True)
    phone: str | None = None
    avatar: str | None = None
