"""Catalog browsing and product administration."""

from typing import Any

from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.app.core.errors import NotFoundError, ValidationError
from src.app.core.models import PageParams
from src.app.entities.service.cart.repository import CartItemRepository
from src.app.entities.service.category.repository import CategoryRepository
from src.app.entities.service.compare.repository import CompareItemRepository
from src.app.entities.service.flash_sale.entity import FlashSale
from src.app.entities.service.flash_sale.repository import FlashSaleRepository
from src.app.entities.service.product.entity import (
    Inventory,
    Product,
    ProductVariant,
    slugify,
)
from src.app.entities.service.product.repository import (
    InventoryRepository,
    ProductFilter,
    ProductRepository,
    ProductVariantRepository,
    SortField,
)
from src.app.entities.service.review.repository import ReplyRepository, ReviewRepository
from src.app.entities.service.wishlist.repository import WishlistItemRepository

STATUS_FLAGS = frozenset({"is_new", "is_sale", "is_flash_sale"})
MAX_SEARCH_RESULTS = 50
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at", "sold", "quantity_purchase"})


class ProductDetail(BaseModel):
    """A product with everything the product page shows."""

    product: Product
    variants: list[ProductVariant]
    inventory: Inventory | None
    flash_sale: FlashSale | None
    avg_rating: float
    review_count: int


class ProductService:
    def __init__(self, db_session: Session):
        self._products = ProductRepository(db_session)
        self._variants = ProductVariantRepository(db_session)
        self._inventory = InventoryRepository(db_session)
        self._categories = CategoryRepository(db_session)
        self._flash_sales = FlashSaleRepository(db_session)
        self._reviews = ReviewRepository(db_session)
        self._replies = ReplyRepository(db_session)
        self._wishlist = WishlistItemRepository(db_session)
        self._compare = CompareItemRepository(db_session)
        self._cart_items = CartItemRepository(db_session)

    def list_products(
        self,
        filters: ProductFilter,
        params: PageParams,
        sort_by: SortField = "created_at",
    ) -> tuple[list[Product], int]:
        return self._products.list_page(
            filters, offset=params.offset, limit=params.limit, sort_by=sort_by
        )

    def search(self, query: str, limit: int = 10) -> list[Product]:
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        return self._products.search(query, min(max(1, limit), MAX_SEARCH_RESULTS))

    def get_product(self, product_id: str) -> ProductDetail:
        product = self.require_product(product_id)
        avg_rating, review_count, _ = self._reviews.rating_summary(product_id)
        return ProductDetail(
            product=product,
            variants=self._variants.list_for_product(product_id),
            inventory=self._inventory.get_for_product(product_id),
            flash_sale=self._flash_sales.get_for_product(product_id),
            avg_rating=avg_rating,
            review_count=review_count,
        )

    def require_product(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def create_product(
        self,
        data: dict[str, Any],
        variants: list[dict[str, Any]] | None = None,
        inventory_quantity: int | None = None,
    ) -> ProductDetail:
        if data.get("price") is None or data["price"] <= 0:
            raise ValidationError("Price must be greater than 0")
        self._check_category(data.get("category_id"))

        product = self._products.create(Product(**{**data, "slug": slugify(data["name"])}))
        if variants:
            self.replace_variants(product.id, variants)
        if inventory_quantity is not None:
            self.set_inventory(product.id, inventory_quantity)
        logger.bind(product_id=product.id).info("product.created")
        return self.get_product(product.id)

    def update_product(self, product_id: str, changes: dict[str, Any]) -> Product:
        product = self.require_product(product_id)
        if "price" in changes and (changes["price"] is None or changes["price"] <= 0):
            raise ValidationError("Price must be greater than 0")
        if "category_id" in changes:
            self._check_category(changes["category_id"])

        updates = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}
        if updates.get("name"):
            updates["slug"] = slugify(updates["name"])
        updated = self._products.update(product.model_copy(update=updates))
        logger.bind(product_id=product_id, fields=sorted(updates)).info("product.updated")
        return updated

    def delete_product(self, product_id: str) -> None:
        self.require_product(product_id)
        review_ids = self._reviews.ids_for_product(product_id)
        self._replies.delete_for_reviews(review_ids)
        self._reviews.delete_for_product(product_id)
        self._flash_sales.delete_for_product(product_id)
        self._wishlist.delete_for_product(product_id)
        self._compare.delete_for_product(product_id)
        self._cart_items.delete_for_product(product_id)
        self._variants.delete_for_product(product_id)
        self._inventory.delete_for_product(product_id)
        self._products.delete(product_id)
        logger.bind(product_id=product_id).info("product.deleted")

    def list_variants(self, product_id: str) -> list[ProductVariant]:
        self.require_product(product_id)
        return self._variants.list_for_product(product_id)

    def replace_variants(
        self, product_id: str, variants: list[dict[str, Any]]
    ) -> list[ProductVariant]:
        self.require_product(product_id)
        if any(int(v.get("quantity", 0)) < 0 for v in variants):
            raise ValidationError("Variant quantity cannot be negative")
        entities = [ProductVariant(product_id=product_id, **v) for v in variants]
        return self._variants.replace_for_product(product_id, entities)

    def get_inventory(self, product_id: str) -> Inventory:
        self.require_product(product_id)
        inventory = self._inventory.get_for_product(product_id)
        if inventory is None:
            raise NotFoundError("Inventory not found")
        return inventory

    def set_inventory(self, product_id: str, quantity: int) -> Inventory:
        self.require_product(product_id)
        if quantity < 0:
            raise ValidationError("Inventory quantity cannot be negative")
        return self._inventory.upsert(product_id, quantity)

    def update_status(self, product_id: str, flags: dict[str, Any]) -> Product:
        unknown = set(flags) - STATUS_FLAGS
        if unknown:
            raise ValidationError(f"Invalid status fields: {', '.join(sorted(unknown))}")
        if not flags:
            raise ValidationError("No status fields provided")
        product = self.require_product(product_id)
        for name, value in flags.items():
            setattr(product, name, bool(value))
        return self._products.update(product)

    def update_sales(self, product_id: str, sold: int = 0, quantity_purchase: int = 0) -> Product:
        if sold < 0 or quantity_purchase < 0:
            raise ValidationError("Sales increments cannot be negative")
        product = self.require_product(product_id)
        product.sold += sold
        product.quantity_purchase += quantity_purchase
        return self._products.update(product)

    def _check_category(self, category_id: str | None) -> None:
        if category_id and self._categories.get(category_id) is None:
            raise NotFoundError("Category not found")
