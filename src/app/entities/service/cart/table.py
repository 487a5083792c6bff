"""Cart and cart item database table models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable, TZDateTime
from src.app.entities.service.cart.entity import CartStatus, ShippingMethod
from src.app.entities.service.payment.entity import PaymentMethod


class CartTable(EntityTable, table=True):
    """Database persistence model for carts."""

    __tablename__ = "carts"

    user_id: str = Field(foreign_key="users.id", index=True)
    status: CartStatus = Field(default=CartStatus.ACTIVE, index=True)
    currency: str = "USD"
    payment_method: PaymentMethod = PaymentMethod.PAYPAL
    shipping_method: ShippingMethod = ShippingMethod.STANDARD
    shipping_address: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    notes: str | None = None
    estimated_delivery: datetime | None = Field(default=None, sa_type=TZDateTime)
    coupon_id: str | None = Field(default=None, foreign_key="coupons.id")
    subtotal: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    discount: float = 0.0
    total: float = 0.0


class CartItemTable(EntityTable, table=True):
    """Database persistence model for cart lines."""

    __tablename__ = "cart_items"

    cart_id: str = Field(foreign_key="carts.id", index=True)
    product_id: str = Field(foreign_key="products.id", index=True)
    variant_id: str = Field(foreign_key="product_variants.id")
    name: str = ""
    image: str | None = None
    color: str | None = None
    size: str | None = None
    sku: str
    quantity: int
    price: float
    original_price: float
    total_price: float = 0.0
    is_gift: bool = False
    gift_message: str | None = None
    customization: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
