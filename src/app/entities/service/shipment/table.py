"""Shipment database table model."""

from datetime import datetime

from sqlmodel import Field

from src.app.entities.core._base import EntityTable, TZDateTime
from src.app.entities.service.shipment.entity import ShipmentStatus


class ShipmentTable(EntityTable, table=True):
    """Database persistence model for shipments."""

    __tablename__ = "shipments"

    order_id: str = Field(foreign_key="orders.id", index=True)
    carrier: str
    tracking_number: str = Field(unique=True, index=True)
    tracking_url: str | None = None
    label_url: str | None = None
    status: ShipmentStatus = ShipmentStatus.PENDING
    shipping_date: datetime | None = Field(default=None, sa_type=TZDateTime)
    estimated_delivery: datetime | None = Field(default=None, sa_type=TZDateTime)
