"""CompareItem domain entity."""

from pydantic import Field

from src.app.entities.core._base import Entity


class CompareItem(Entity):
    """A product placed in a user's comparison list."""

    user_id: str = Field(description="Owner")
    product_id: str = Field(description="Listed product")
