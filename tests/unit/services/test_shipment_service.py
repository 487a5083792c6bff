"""Unit tests for shipment creation and tracking updates."""

import pytest

from src.app.core.errors import NotFoundError, ValidationError
from src.app.core.services.commerce import OrderService
from src.app.core.services.shipment import ShipmentService
from src.app.entities.service.order import OrderRepository
from src.app.entities.service.order.entity import OrderStatus
from src.app.entities.service.shipment.entity import ShipmentStatus


@pytest.fixture
def order(user, product, place_order):
    return place_order(user, product).order


class TestShipments:
    def test_create_ships_order(self, session, order):
        shipment = ShipmentService(session).create(order.id, "DHL")

        assert shipment.status == ShipmentStatus.SHIPPED
        assert shipment.tracking_number.startswith("DHL-")
        assert shipment.tracking_url.endswith(shipment.tracking_number)
        assert shipment.shipping_date is not None
        assert OrderRepository(session).get(order.id).status == OrderStatus.SHIPPED

    def test_create_for_unknown_order(self, session):
        with pytest.raises(NotFoundError, match="Order not found"):
            ShipmentService(session).create("missing", "DHL")

    def test_shipments_show_up_in_tracking(self, session, order):
        shipment = ShipmentService(session).create(order.id, "UPS")
        tracking = OrderService(session).track_order(order.order_number)

        assert tracking.status == OrderStatus.SHIPPED
        assert [s.id for s in tracking.shipments] == [shipment.id]

    def test_new_carrier_gets_new_tracking(self, session, order):
        service = ShipmentService(session)
        shipment = service.create(order.id, "DHL")

        updated = service.update(shipment.id, carrier="FedEx")

        assert updated.carrier == "FedEx"
        assert updated.tracking_number.startswith("FedEx-")

    def test_delivered_status_delivers_order(self, session, order):
        service = ShipmentService(session)
        shipment = service.create(order.id, "DHL")

        service.update(shipment.id, status=ShipmentStatus.DELIVERED)

        saved = OrderRepository(session).get(order.id)
        assert saved.status == OrderStatus.DELIVERED
        assert saved.is_delivered

    def test_update_needs_carrier_or_status(self, session, order):
        service = ShipmentService(session)
        shipment = service.create(order.id, "DHL")
        with pytest.raises(ValidationError):
            service.update(shipment.id)

    def test_delete(self, session, order):
        service = ShipmentService(session)
        shipment = service.create(order.id, "DHL")

        service.delete(shipment.id)

        with pytest.raises(NotFoundError):
            service.delete(shipment.id)
