"""Category database table model."""

from sqlmodel import Field

from src.app.entities.core._base import EntityTable


class CategoryTable(EntityTable, table=True):
    """Database persistence model for categories."""

    __tablename__ = "categories"

    name: str = Field(unique=True, index=True)
    slug: str = Field(index=True)
    description: str | None = None
    image: str | None = None
