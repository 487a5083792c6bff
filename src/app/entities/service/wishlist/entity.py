"""WishlistItem domain entity."""

from pydantic import Field

from src.app.entities.core._base import Entity


class WishlistItem(Entity):
    """A product saved for later by a user."""

    user_id: str = Field(description="Owner")
    product_id: str = Field(description="Listed product")
