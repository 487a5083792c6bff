"""Entity package: Product, its variants and its inventory record."""

from .entity import Inventory, Product, ProductVariant, slugify
from .repository import (
    InventoryRepository,
    ProductFilter,
    ProductRepository,
    ProductVariantRepository,
)
from .table import InventoryTable, ProductTable, ProductVariantTable

__all__ = [
    "Inventory",
    "InventoryRepository",
    "InventoryTable",
    "Product",
    "ProductFilter",
    "ProductRepository",
    "ProductTable",
    "ProductVariant",
    "ProductVariantRepository",
    "ProductVariantTable",
    "slugify",
]
