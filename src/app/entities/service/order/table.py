"""Order and order item database table models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable, TZDateTime
from src.app.entities.service.order.entity import OrderStatus
from src.app.entities.service.payment.entity import PaymentMethod, PaymentStatus


class OrderTable(EntityTable, table=True):
    """Database persistence model for orders."""

    __tablename__ = "orders"

    order_number: str = Field(unique=True, index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod
    shipping_address: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
    items_price: float = 0.0
    tax_price: float = 0.0
    shipping_price: float = 0.0
    discount_amount: float = 0.0
    total_price: float = 0.0
    coupon_id: str | None = Field(default=None, foreign_key="coupons.id", index=True)
    transaction_id: str | None = None
    is_delivered: bool = False
    delivered_at: datetime | None = Field(default=None, sa_type=TZDateTime)
    admin_notes: str | None = None
    notes: str | None = None


class OrderItemTable(EntityTable, table=True):
    """Database persistence model for order lines."""

    __tablename__ = "order_items"

    order_id: str = Field(foreign_key="orders.id", index=True)
    product_id: str = Field(index=True)
    variant_id: str | None = None
    name: str
    image: str | None = None
    color: str | None = None
    size: str | None = None
    quantity: int
    price: float
    total_price: float
    inventory_taken: int = 0
