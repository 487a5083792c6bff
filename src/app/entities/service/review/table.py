"""Review and reply database table models."""

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable


class ReviewTable(EntityTable, table=True):
    """Database persistence model for reviews."""

    __tablename__ = "reviews"

    product_id: str = Field(foreign_key="products.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    rate: int
    message: str = ""
    colors: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    sizes: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    likes: int = 0


class ReplyTable(EntityTable, table=True):
    """Database persistence model for review replies."""

    __tablename__ = "review_replies"

    review_id: str = Field(foreign_key="reviews.id", unique=True, index=True)
    user_id: str = Field(foreign_key="users.id")
    message: str
