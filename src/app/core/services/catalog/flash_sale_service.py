"""Flash sale scheduling and product price adjustment."""

from datetime import datetime

from loguru import logger
from sqlmodel import Session

from src.app.core.errors import ConflictError, NotFoundError, ValidationError
from src.app.entities.core._base import as_utc, utc_now
from src.app.entities.service.flash_sale.entity import FlashSale, discounted_price
from src.app.entities.service.flash_sale.repository import FlashSaleRepository
from src.app.entities.service.product.entity import Product
from src.app.entities.service.product.repository import ProductRepository


def validate_sale_window(discount: float, start_date: datetime, end_date: datetime) -> None:
    if as_utc(start_date) >= as_utc(end_date):
        raise ValidationError("Start date must be before end date")
    if not 0 < discount <= 100:
        raise ValidationError("Discount must be greater than 0 and at most 100")


class FlashSaleService:
    def __init__(self, db_session: Session):
        self._sales = FlashSaleRepository(db_session)
        self._products = ProductRepository(db_session)

    def list_all(self) -> list[FlashSale]:
        return self._sales.list_by_start()

    def get(self, sale_id: str) -> FlashSale:
        sale = self._sales.get(sale_id)
        if sale is None:
            raise NotFoundError("Flash sale not found")
        return sale

    def create(
        self, product_id: str, discount: float, start_date: datetime, end_date: datetime
    ) -> FlashSale:
        validate_sale_window(discount, start_date, end_date)
        product = self._require_product(product_id)
        if self._sales.get_for_product(product_id) is not None:
            raise ConflictError("Product already has a flash sale")

        sale = self._sales.create(
            FlashSale(
                product_id=product_id,
                discount=discount,
                start_date=start_date,
                end_date=end_date,
                base_price=product.price,
                price=discounted_price(product.price, discount),
            )
        )
        self._apply_to_product(product, sale)
        logger.bind(flash_sale_id=sale.id, product_id=product_id, price=sale.price).info(
            "flash_sale.created"
        )
        return sale

    def update(
        self,
        sale_id: str,
        *,
        discount: float | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> FlashSale:
        sale = self.get(sale_id)
        sale.discount = discount if discount is not None else sale.discount
        sale.start_date = start_date or sale.start_date
        sale.end_date = end_date or sale.end_date
        validate_sale_window(sale.discount, sale.start_date, sale.end_date)

        product = self._require_product(sale.product_id)
        sale.price = discounted_price(sale.base_price, sale.discount)
        updated = self._sales.update(sale)
        self._apply_to_product(product, updated)
        return updated

    def upsert_for_product(
        self, product_id: str, discount: float, start_date: datetime, end_date: datetime
    ) -> FlashSale:
        """Create or replace a product's flash sale; the start may not be in the past."""
        if as_utc(start_date) < utc_now():
            raise ValidationError("Start date cannot be in the past")
        existing = self._sales.get_for_product(product_id)
        if existing is None:
            return self.create(product_id, discount, start_date, end_date)
        return self.update(
            existing.id, discount=discount, start_date=start_date, end_date=end_date
        )

    def delete(self, sale_id: str) -> None:
        sale = self.get(sale_id)
        self._sales.delete(sale.id)
        product = self._products.get(sale.product_id)
        if product is not None:
            product.price = sale.base_price
            product.is_flash_sale = False
            self._products.update(product)
        logger.bind(flash_sale_id=sale_id).info("flash_sale.deleted")

    def _apply_to_product(self, product: Product, sale: FlashSale) -> None:
        if product.origin_price is None:
            product.origin_price = product.price
        product.price = min(sale.price, sale.base_price)
        product.is_flash_sale = True
        product.is_sale = True
        self._products.update(product)

    def _require_product(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product
