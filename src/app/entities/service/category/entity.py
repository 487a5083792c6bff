"""Entity: Category."""

from pydantic import Field

from src.app.entities.core._base import Entity


class Category(Entity):
    """Product category shown in navigation and used by coupon restrictions."""

    name: str = Field(description="Unique category name")
    slug: str = Field(description="URL slug derived from the name")
    description: str | None = Field(default=None, description="Category description")
    image: str | None = Field(default=None, description="Category image URL")
