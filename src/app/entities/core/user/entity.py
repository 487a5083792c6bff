"""User domain entity."""

from enum import Enum
from typing import Any

from pydantic import Field

from src.app.entities.core._base import Entity


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Entity):
    """A customer or administrator account.

    ``password_hash`` and ``refresh_token`` never leave the API; routers
    respond with a public projection of this entity.
    """

    email: str = Field(description="Unique login email")
    password_hash: str = Field(description="passlib hash of the password")
    name: str | None = Field(default=None, description="Display name")
    role: UserRole = Field(default=UserRole.USER, description="Authorization role")
    refresh_token: str | None = Field(
        default=None, description="Current opaque refresh token"
    )
    phone: str | None = Field(default=None, description="Contact phone number")
    avatar: str | None = Field(default=None, description="Avatar image URL")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __eq__(self, other: Any) -> bool:
        """Compare users by identity and login attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False
        return (
            self.id == other.id
            and self.email == other.email
            and self.name == other.name
            and self.role == other.role
        )

    def __hash__(self) -> int:
        return hash((self.id, self.email, self.name, self.role))
