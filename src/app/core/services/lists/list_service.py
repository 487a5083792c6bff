"""Per-user product lists: wishlist and compare."""

from datetime import datetime
from typing import Any, ClassVar

from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.app.core.errors import ConflictError, NotFoundError, ValidationError
from src.app.entities.service.category.repository import CategoryRepository
from src.app.entities.service.compare.entity import CompareItem
from src.app.entities.service.compare.repository import CompareItemRepository
from src.app.entities.service.product.entity import Product
from src.app.entities.service.product.repository import ProductRepository
from src.app.entities.service.review.repository import ReviewRepository
from src.app.entities.service.wishlist.entity import WishlistItem
from src.app.entities.service.wishlist.repository import WishlistItemRepository
from src.app.runtime.context import get_config

COMPARISON_FIELDS = (
    "name",
    "price",
    "origin_price",
    "brand",
    "category",
    "average_rating",
    "review_count",
    "is_new",
    "is_sale",
    "is_flash_sale",
    "sizes",
    "colors",
    "weight",
)


class ListedProduct(BaseModel):
    id: str
    product: Product
    added_at: datetime


class ProductComparison(BaseModel):
    products: list[Product]
    fields: list[str]
    matrix: dict[str, list[Any]]


class ProductListService:
    """Shared add/remove/list/clear/check behaviour over a user product list."""

    item_cls: ClassVar[type[WishlistItem] | type[CompareItem]]
    repository_cls: ClassVar[type[WishlistItemRepository] | type[CompareItemRepository]]
    label: ClassVar[str]

    def __init__(self, db_session: Session):
        self._items = self.repository_cls(db_session)
        self._products = ProductRepository(db_session)

    def add(self, user_id: str, product_id: str) -> ListedProduct:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        if self._items.find(user_id, product_id) is not None:
            raise ConflictError(f"Product is already in your {self.label}")
        self._check_capacity(user_id)
        item = self._items.create(self.item_cls(user_id=user_id, product_id=product_id))
        logger.bind(user_id=user_id, product_id=product_id).info(f"{self.label}.added")
        return ListedProduct(id=item.id, product=product, added_at=item.created_at)

    def remove(self, user_id: str, product_id: str) -> None:
        item = self._items.find(user_id, product_id)
        if item is None:
            raise NotFoundError(f"Product is not in your {self.label}")
        self._items.delete(item.id)
        logger.bind(user_id=user_id, product_id=product_id).info(f"{self.label}.removed")

    def list_for_user(self, user_id: str) -> list[ListedProduct]:
        items = self._items.list_for_user(user_id)
        products = self._products.get_many({item.product_id for item in items})
        return [
            ListedProduct(id=item.id, product=products[item.product_id], added_at=item.created_at)
            for item in items
            if item.product_id in products
        ]

    def clear(self, user_id: str) -> int:
        removed = self._items.delete_for_user(user_id)
        logger.bind(user_id=user_id, removed=removed).info(f"{self.label}.cleared")
        return removed

    def contains(self, user_id: str, product_id: str) -> bool:
        return self._items.find(user_id, product_id) is not None

    def _check_capacity(self, user_id: str) -> None:
        pass


class WishlistService(ProductListService):
    item_cls = WishlistItem
    repository_cls = WishlistItemRepository
    label = "wishlist"


class CompareService(ProductListService):
    item_cls = CompareItem
    repository_cls = CompareItemRepository
    label = "compare"

    def __init__(self, db_session: Session, max_products: int | None = None):
        super().__init__(db_session)
        self._max_products = max_products or get_config().commerce.max_compare_products
        self._categories = CategoryRepository(db_session)
        self._reviews = ReviewRepository(db_session)

    def _check_capacity(self, user_id: str) -> None:
        if self._items.count_for_user(user_id) >= self._max_products:
            raise ValidationError(
                f"You can compare at most {self._max_products} products at a time"
            )

    def comparison(self, user_id: str) -> ProductComparison:
        """Build a field-by-field matrix over the user's compared products."""
        products = [listed.product for listed in self.list_for_user(user_id)]
        category_names = self._categories.names_by_id(
            {p.category_id for p in products if p.category_id}
        )
        ratings = self._reviews.ratings_by_product({p.id for p in products})

        def value_of(product: Product, field: str) -> Any:
            if field == "category":
                return category_names.get(product.category_id or "")
            if field == "average_rating":
                return ratings.get(product.id, (0.0, 0))[0]
            if field == "review_count":
                return ratings.get(product.id, (0.0, 0))[1]
            return getattr(product, field)

        matrix = {
            field: [value_of(product, field) for product in products]
            for field in COMPARISON_FIELDS
        }
        return ProductComparison(products=products, fields=list(COMPARISON_FIELDS), matrix=matrix)
