"""WishlistItem database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable


class WishlistItemTable(EntityTable, table=True):
    """Database persistence model for wishlist entries."""

    __tablename__ = "wishlist_items"
    __table_args__ = (sa.UniqueConstraint("user_id", "product_id"),)

    user_id: str = Field(foreign_key="users.id", index=True)
    product_id: str = Field(foreign_key="products.id", index=True)
