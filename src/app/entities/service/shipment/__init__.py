"""Entity package: Shipment."""

from .entity import Shipment, ShipmentStatus
from .repository import ShipmentRepository
from .table import ShipmentTable

__all__ = ["Shipment", "ShipmentRepository", "ShipmentStatus", "ShipmentTable"]
