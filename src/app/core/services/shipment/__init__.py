from .shipment_service import ShipmentService

__all__ = ["ShipmentService"]
