"""Shipment creation and tracking updates for orders."""

from datetime import datetime

from loguru import logger
from sqlmodel import Session

from src.app.core.errors import NotFoundError, ValidationError
from src.app.core.models import PageParams
from src.app.core.services.notification import NotificationService, templates
from src.app.entities.core._base import utc_now
from src.app.entities.service.order.entity import Order, OrderStatus
from src.app.entities.service.order.repository import OrderRepository
from src.app.entities.service.shipment.entity import Shipment, ShipmentStatus
from src.app.entities.service.shipment.repository import ShipmentRepository


class ShipmentService:
    def __init__(self, db_session: Session):
        self._shipments = ShipmentRepository(db_session)
        self._orders = OrderRepository(db_session)
        self._notifications = NotificationService(db_session)

    def create(
        self, order_id: str, carrier: str, estimated_delivery: datetime | None = None
    ) -> Shipment:
        order = self._require_order(order_id)

        shipment = Shipment.for_order(order.id, carrier, estimated_delivery)
        shipment.status = ShipmentStatus.SHIPPED
        shipment.shipping_date = utc_now()
        shipment = self._shipments.create(shipment)

        order.status = OrderStatus.SHIPPED
        order = self._orders.update(order)
        self._notifications.notify_order(
            order, templates.order_shipped(order, shipment.tracking_number)
        )
        logger.bind(
            order_id=order.id, shipment_id=shipment.id, tracking_number=shipment.tracking_number
        ).info("shipment.created")
        return shipment

    def list_all(self, params: PageParams) -> tuple[list[Shipment], int]:
        return self._shipments.list_page(offset=params.offset, limit=params.limit)

    def get(self, shipment_id: str) -> Shipment:
        shipment = self._shipments.get(shipment_id)
        if shipment is None:
            raise NotFoundError("Shipment not found")
        return shipment

    def update(
        self,
        shipment_id: str,
        *,
        carrier: str | None = None,
        status: ShipmentStatus | None = None,
        estimated_delivery: datetime | None = None,
    ) -> Shipment:
        if not carrier and status is None:
            raise ValidationError("Carrier or status is required")
        shipment = self.get(shipment_id)

        if carrier and carrier != shipment.carrier:
            shipment.assign_tracking(carrier)
        if estimated_delivery is not None:
            shipment.estimated_delivery = estimated_delivery
        if status is not None:
            shipment.status = status
        shipment = self._shipments.update(shipment)

        order = self._orders.get(shipment.order_id)
        if order is not None:
            if status == ShipmentStatus.DELIVERED:
                order.mark_delivered()
                order = self._orders.update(order)
                self._notifications.notify_order(order, templates.order_delivered(order))
            elif status is not None:
                self._notifications.notify_order(
                    order,
                    templates.shipment_update(order, status.value, shipment.tracking_number),
                )

        logger.bind(
            shipment_id=shipment.id, status=shipment.status.value, carrier=shipment.carrier
        ).info("shipment.updated")
        return shipment

    def delete(self, shipment_id: str) -> None:
        if not self._shipments.delete(shipment_id):
            raise NotFoundError("Shipment not found")
        logger.bind(shipment_id=shipment_id).info("shipment.deleted")

    def _require_order(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order
