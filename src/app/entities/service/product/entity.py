"""Entity: Product."""

import re
from typing import Any

from pydantic import Field

from src.app.entities.core._base import Entity


def slugify(value: str) -> str:
    """Lowercase, drop non-word characters, hyphenate spaces, collapse hyphens."""
    slug = value.strip().lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


class Product(Entity):
    """Product entity representing an item in the catalog.

    Stock lives on variants; ``sold`` and ``quantity_purchase`` are sales
    counters maintained by the order workflow.
    """

    name: str = Field(description="Product name")
    slug: str = Field(default="", description="URL slug")
    description: str | None = Field(default=None, description="Long description")
    about_product: list[str] = Field(default_factory=list, description="Bullet points")
    price: float = Field(description="Current selling price")
    origin_price: float | None = Field(default=None, description="Price before discounts")
    brand: str | None = Field(default=None, description="Brand name")
    gender: str | None = Field(default=None, description="Target gender")
    product_type: str | None = Field(default=None, description="Product type label")
    category_id: str | None = Field(default=None, description="Owning category")
    thumb_image: list[str] = Field(default_factory=list, description="Thumbnail URLs")
    images: list[str] = Field(default_factory=list, description="Gallery image URLs")
    sizes: list[str] = Field(default_factory=list, description="Available sizes")
    colors: list[str] = Field(default_factory=list, description="Available colors")
    weight: float | None = Field(default=None, description="Shipping weight")
    is_new: bool = Field(default=False)
    is_sale: bool = Field(default=False)
    is_flash_sale: bool = Field(default=False)
    sold: int = Field(default=0, description="Units sold")
    quantity_purchase: int = Field(default=0, description="Number of purchases")

    @property
    def list_price(self) -> float:
        """Price shown as the struck-through original price."""
        return self.origin_price if self.origin_price else self.price

    def record_sale(self, quantity: int) -> None:
        self.sold += quantity
        self.quantity_purchase += 1

    def revert_sale(self, quantity: int) -> None:
        self.sold = max(0, self.sold - quantity)

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False
        return self.id == other.id and self.slug == other.slug and self.price == other.price

    def __hash__(self) -> int:
        return hash((self.id, self.slug, self.price))


class ProductVariant(Entity):
    """A purchasable color/size combination of a product holding its own stock."""

    product_id: str = Field(description="Parent product")
    color_name: str | None = Field(default=None, description="Human readable color")
    color: str | None = Field(default=None, description="Color key")
    color_code: str | None = Field(default=None, description="Hex color code")
    size: str | None = Field(default=None, description="Size label")
    image: str | None = Field(default=None, description="Variant image URL")
    quantity: int = Field(default=0, ge=0, description="Units in stock")

    def matches(self, color: str | None, size: str | None) -> bool:
        return self.color == color and self.size == size


class Inventory(Entity):
    """Aggregate stock counter kept per product."""

    product_id: str = Field(description="Product this record counts")
    quantity: int = Field(default=0, ge=0, description="Units available")
