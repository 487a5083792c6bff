"""FlashSale database table model."""

from datetime import datetime

from sqlmodel import Field

from src.app.entities.core._base import EntityTable, TZDateTime


class FlashSaleTable(EntityTable, table=True):
    """Database persistence model for flash sales."""

    __tablename__ = "flash_sales"

    product_id: str = Field(foreign_key="products.id", unique=True, index=True)
    discount: float
    start_date: datetime = Field(sa_type=TZDateTime)
    end_date: datetime = Field(sa_type=TZDateTime)
    base_price: float
    price: float
