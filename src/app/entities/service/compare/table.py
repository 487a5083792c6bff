"""CompareItem database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable


class CompareItemTable(EntityTable, table=True):
    """Database persistence model for compare entries."""

    __tablename__ = "compare_items"
    __table_args__ = (sa.UniqueConstraint("user_id", "product_id"),)

    user_id: str = Field(foreign_key="users.id", index=True)
    product_id: str = Field(foreign_key="products.id", index=True)
