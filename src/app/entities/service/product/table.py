"""Product, variant and inventory database table models."""

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products."""

    __tablename__ = "products"

    name: str = Field(index=True)
    slug: str = Field(default="", index=True)
    description: str | None = None
    about_product: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    price: float
    origin_price: float | None = None
    brand: str | None = Field(default=None, index=True)
    gender: str | None = None
    product_type: str | None = None
    category_id: str | None = Field(default=None, foreign_key="categories.id", index=True)
    thumb_image: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    images: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    sizes: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    colors: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    weight: float | None = None
    is_new: bool = False
    is_sale: bool = False
    is_flash_sale: bool = False
    sold: int = 0
    quantity_purchase: int = 0


class ProductVariantTable(EntityTable, table=True):
    """Database persistence model for product variants."""

    __tablename__ = "product_variants"

    product_id: str = Field(foreign_key="products.id", index=True)
    color_name: str | None = None
    color: str | None = None
    color_code: str | None = None
    size: str | None = None
    image: str | None = None
    quantity: int = 0


class InventoryTable(EntityTable, table=True):
    """Database persistence model for per-product inventory."""

    __tablename__ = "inventories"

    product_id: str = Field(foreign_key="products.id", unique=True, index=True)
    quantity: int = 0
