"""Product, variant and inventory repositories."""

from dataclasses import dataclass
from typing import Literal

from sqlalchemy import delete
from sqlmodel import col, func, or_, select

from src.app.entities.core._base import Repository
from src.app.entities.service.product.entity import Inventory, Product, ProductVariant
from src.app.entities.service.product.table import (
    InventoryTable,
    ProductTable,
    ProductVariantTable,
)

SortField = Literal["created_at", "price", "name", "sold"]


@dataclass
class ProductFilter:
    """Catalog listing filters; ``None`` means "do not filter"."""

    category_id: str | None = None
    gender: str | None = None
    brand: str | None = None
    is_new: bool | None = None
    is_sale: bool | None = None
    min_price: float | None = None
    max_price: float | None = None

    def conditions(self) -> list:
        conditions = []
        if self.category_id:
            conditions.append(ProductTable.category_id == self.category_id)
        if self.gender:
            conditions.append(ProductTable.gender == self.gender)
        if self.brand:
            conditions.append(func.lower(ProductTable.brand) == self.brand.lower())
        if self.is_new is not None:
            conditions.append(ProductTable.is_new == self.is_new)
        if self.is_sale is not None:
            conditions.append(ProductTable.is_sale == self.is_sale)
        if self.min_price is not None:
            conditions.append(ProductTable.price >= self.min_price)
        if self.max_price is not None:
            conditions.append(ProductTable.price <= self.max_price)
        return conditions


class ProductRepository(Repository[Product, ProductTable]):
    """Data-access layer for products."""

    entity_cls = Product
    table_cls = ProductTable

    def list_page(
        self,
        filters: ProductFilter,
        *,
        offset: int,
        limit: int,
        sort_by: SortField = "created_at",
    ) -> tuple[list[Product], int]:
        conditions = filters.conditions()
        sort_column = getattr(ProductTable, sort_by)
        statement = (
            select(ProductTable)
            .where(*conditions)
            .order_by(col(sort_column).desc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return self._to_entities(rows), self.count(*conditions)

    def search(self, query: str, limit: int) -> list[Product]:
        pattern = f"%{query.strip()}%"
        statement = (
            select(ProductTable)
            .where(
                or_(
                    col(ProductTable.name).ilike(pattern),
                    col(ProductTable.description).ilike(pattern),
                    col(ProductTable.brand).ilike(pattern),
                )
            )
            .order_by(col(ProductTable.sold).desc())
            .limit(limit)
        )
        return self._to_entities(self._session.exec(statement).all())

    def get_many(self, product_ids: set[str]) -> dict[str, Product]:
        if not product_ids:
            return {}
        statement = select(ProductTable).where(col(ProductTable.id).in_(product_ids))
        return {row.id: self._to_entity(row) for row in self._session.exec(statement).all()}

    def count_for_category(self, category_id: str) -> int:
        return self.count(ProductTable.category_id == category_id)

    def top_sellers(self, limit: int = 10) -> list[Product]:
        statement = select(ProductTable).order_by(col(ProductTable.sold).desc()).limit(limit)
        return self._to_entities(self._session.exec(statement).all())


class ProductVariantRepository(Repository[ProductVariant, ProductVariantTable]):
    """Data-access layer for product variants and their stock."""

    entity_cls = ProductVariant
    table_cls = ProductVariantTable

    def list_for_product(self, product_id: str) -> list[ProductVariant]:
        statement = (
            select(ProductVariantTable)
            .where(ProductVariantTable.product_id == product_id)
            .order_by(col(ProductVariantTable.created_at))
        )
        return self._to_entities(self._session.exec(statement).all())

    def replace_for_product(
        self, product_id: str, variants: list[ProductVariant]
    ) -> list[ProductVariant]:
        self.delete_for_product(product_id)
        return [self.create(variant.model_copy(update={"product_id": product_id})) for variant in variants]

    def delete_for_product(self, product_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(ProductVariantTable).where(ProductVariantTable.product_id == product_id)
        )

    def find_by_attributes(
        self, product_id: str, color: str | None, size: str | None
    ) -> ProductVariant | None:
        statement = select(ProductVariantTable).where(
            ProductVariantTable.product_id == product_id,
            ProductVariantTable.color == color,
            ProductVariantTable.size == size,
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def adjust_stock(self, variant_id: str, delta: int) -> ProductVariant | None:
        """Add ``delta`` units to a variant's stock under a row lock.

        Returns the updated variant, or ``None`` when the variant does not
        exist or the change would take stock below zero.
        """
        row = self._get_row(variant_id, for_update=True)
        if row is None or row.quantity + delta < 0:
            return None
        row.quantity += delta
        self._session.add(row)
        self._session.flush()
        return self._to_entity(row)

    def total_stock(self) -> int:
        statement = select(func.coalesce(func.sum(ProductVariantTable.quantity), 0))
        return int(self._session.exec(statement).one())


class InventoryRepository(Repository[Inventory, InventoryTable]):
    """Data-access layer for per-product inventory counters."""

    entity_cls = Inventory
    table_cls = InventoryTable

    def get_for_product(self, product_id: str) -> Inventory | None:
        statement = select(InventoryTable).where(InventoryTable.product_id == product_id)
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def upsert(self, product_id: str, quantity: int) -> Inventory:
        existing = self.get_for_product(product_id)
        if existing is None:
            return self.create(Inventory(product_id=product_id, quantity=quantity))
        existing.quantity = quantity
        return self.update(existing)

    def adjust(self, product_id: str, delta: int) -> int:
        """Add ``delta`` to the counter, clamping at zero.

        Returns the change actually applied, 0 when the product has no record.
        """
        statement = (
            select(InventoryTable)
            .where(InventoryTable.product_id == product_id)
            .with_for_update()
        )
        row = self._session.exec(statement).first()
        if row is None:
            return 0
        previous = row.quantity
        row.quantity = max(0, previous + delta)
        self._session.add(row)
        self._session.flush()
        return row.quantity - previous

    def delete_for_product(self, product_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(InventoryTable).where(InventoryTable.product_id == product_id)
        )

    def list_with_quantity_at_most(self, threshold: int) -> list[Inventory]:
        statement = select(InventoryTable).where(InventoryTable.quantity <= threshold)
        return self._to_entities(self._session.exec(statement).all())
