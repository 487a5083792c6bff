"""Entities: Order and OrderItem."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from src.app.entities.core._base import Entity, utc_now
from src.app.entities.service.payment.entity import PaymentMethod, PaymentStatus


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Orders in these states can no longer be cancelled by anyone.
NON_CANCELLABLE_STATUSES = frozenset(
    {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)

# Orders in these states still hold on to their coupon.
COUPON_HOLDING_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
)


class Order(Entity):
    """A placed order with its price breakdown."""

    order_number: str = Field(description="Human readable unique number")
    user_id: str = Field(description="Customer")
    status: OrderStatus = Field(default=OrderStatus.PENDING)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    payment_method: PaymentMethod = Field(description="Chosen payment method")
    shipping_address: dict[str, Any] = Field(
        default_factory=dict, description="{address, city, postal_code, country}"
    )
    items_price: float = Field(default=0.0)
    tax_price: float = Field(default=0.0)
    shipping_price: float = Field(default=0.0)
    discount_amount: float = Field(default=0.0)
    total_price: float = Field(default=0.0)
    coupon_id: str | None = Field(default=None)
    transaction_id: str | None = Field(default=None)
    is_delivered: bool = Field(default=False)
    delivered_at: datetime | None = Field(default=None)
    admin_notes: str | None = Field(default=None)
    notes: str | None = Field(default=None)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED

    @property
    def can_cancel(self) -> bool:
        return self.status not in NON_CANCELLABLE_STATUSES

    def mark_delivered(self) -> None:
        self.status = OrderStatus.DELIVERED
        self.is_delivered = True
        self.delivered_at = utc_now()

    def cancel(self, reason: str | None = None) -> None:
        self.status = OrderStatus.CANCELLED
        if self.payment_status == PaymentStatus.COMPLETED:
            self.payment_status = PaymentStatus.REFUNDED
        else:
            self.payment_status = PaymentStatus.FAILED
        if reason:
            note = f"Cancelled: {reason}"
            self.admin_notes = f"{self.admin_notes}\n{note}" if self.admin_notes else note


class OrderItem(Entity):
    """Snapshot of a cart line at checkout."""

    order_id: str = Field(description="Owning order")
    product_id: str = Field(description="Purchased product")
    variant_id: str | None = Field(default=None, description="Purchased variant")
    name: str = Field(description="Product name at checkout")
    image: str | None = Field(default=None)
    color: str | None = Field(default=None)
    size: str | None = Field(default=None)
    quantity: int = Field(ge=1)
    price: float = Field(description="Unit price at checkout")
    total_price: float = Field(description="price * quantity")
    inventory_taken: int = Field(
        default=0, ge=0, description="Inventory units decremented at checkout"
    )
