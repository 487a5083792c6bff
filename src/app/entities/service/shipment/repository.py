"""Shipment repository."""

from sqlalchemy import delete
from sqlmodel import col, select

from src.app.entities.core._base import Repository
from src.app.entities.service.shipment.entity import Shipment
from src.app.entities.service.shipment.table import ShipmentTable


class ShipmentRepository(Repository[Shipment, ShipmentTable]):
    """Data-access layer for shipments."""

    entity_cls = Shipment
    table_cls = ShipmentTable

    def list_page(self, *, offset: int, limit: int) -> tuple[list[Shipment], int]:
        statement = (
            select(ShipmentTable)
            .order_by(col(ShipmentTable.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        return self._to_entities(self._session.exec(statement).all()), self.count()

    def list_for_order(self, order_id: str) -> list[Shipment]:
        statement = (
            select(ShipmentTable)
            .where(ShipmentTable.order_id == order_id)
            .order_by(col(ShipmentTable.created_at))
        )
        return self._to_entities(self._session.exec(statement).all())

    def delete_for_order(self, order_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(ShipmentTable).where(ShipmentTable.order_id == order_id)
        )
