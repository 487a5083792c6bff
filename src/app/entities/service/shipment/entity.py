"""Shipment domain entity."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from src.app.core.security import random_digits
from src.app.entities.core._base import Entity

TRACKING_BASE_URL = "https://mock-courier.com"


class ShipmentStatus(str, Enum):
    PENDING = "PENDING"
    SHIPPED = "SHIPPED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    RETURNED = "RETURNED"


class Shipment(Entity):
    """A parcel sent for an order."""

    order_id: str = Field(description="Shipped order")
    carrier: str = Field(min_length=1, description="Courier name")
    tracking_number: str = Field(description="Unique courier tracking number")
    tracking_url: str | None = Field(default=None)
    label_url: str | None = Field(default=None)
    status: ShipmentStatus = Field(default=ShipmentStatus.PENDING)
    shipping_date: datetime | None = Field(default=None)
    estimated_delivery: datetime | None = Field(default=None)

    def assign_tracking(self, carrier: str) -> None:
        """Generate fresh tracking details for ``carrier``."""
        self.carrier = carrier
        self.tracking_number = f"{carrier}-{random_digits(10)}"
        self.tracking_url = f"{TRACKING_BASE_URL}/track/{self.tracking_number}"
        self.label_url = f"{TRACKING_BASE_URL}/label/{self.tracking_number}.pdf"

    @classmethod
    def for_order(
        cls, order_id: str, carrier: str, estimated_delivery: datetime | None = None
    ) -> "Shipment":
        shipment = cls(
            order_id=order_id,
            carrier=carrier,
            tracking_number="",
            estimated_delivery=estimated_delivery,
        )
        shipment.assign_tracking(carrier)
        return shipment
