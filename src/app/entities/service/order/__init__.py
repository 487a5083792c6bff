"""Entity package: Order and OrderItem."""

from .entity import (
    COUPON_HOLDING_STATUSES,
    NON_CANCELLABLE_STATUSES,
    Order,
    OrderItem,
    OrderStatus,
)
from .repository import OrderItemRepository, OrderRepository
from .table import OrderItemTable, OrderTable

__all__ = [
    "COUPON_HOLDING_STATUSES",
    "NON_CANCELLABLE_STATUSES",
    "Order",
    "OrderItem",
    "OrderItemRepository",
    "OrderItemTable",
    "OrderRepository",
    "OrderStatus",
    "OrderTable",
]
