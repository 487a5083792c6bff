"""FlashSale repository for data access operations."""

from sqlalchemy import delete
from sqlmodel import col, select

from src.app.entities.core._base import Repository
from src.app.entities.service.flash_sale.entity import FlashSale
from src.app.entities.service.flash_sale.table import FlashSaleTable


class FlashSaleRepository(Repository[FlashSale, FlashSaleTable]):
    """Data-access layer for flash sales."""

    entity_cls = FlashSale
    table_cls = FlashSaleTable

    def get_for_product(self, product_id: str) -> FlashSale | None:
        statement = select(FlashSaleTable).where(FlashSaleTable.product_id == product_id)
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def list_by_start(self) -> list[FlashSale]:
        statement = select(FlashSaleTable).order_by(col(FlashSaleTable.start_date))
        return self._to_entities(self._session.exec(statement).all())

    def delete_for_product(self, product_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(FlashSaleTable).where(FlashSaleTable.product_id == product_id)
        )
