"""Entities: Cart and CartItem."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from src.app.entities.core._base import Entity
from src.app.entities.service.payment.entity import PaymentMethod


class CartStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    CONVERTED = "CONVERTED"
    ABANDONED = "ABANDONED"


class ShippingMethod(str, Enum):
    STANDARD = "STANDARD"
    EXPRESS = "EXPRESS"
    OVERNIGHT = "OVERNIGHT"
    PICKUP = "PICKUP"


@dataclass(frozen=True)
class PricingRules:
    """Tax and shipping rules applied to carts and orders."""

    tax_rate: float
    free_shipping_threshold: float
    shipping_fee: float

    def tax_for(self, subtotal: float) -> float:
        return round(subtotal * self.tax_rate, 2)

    def shipping_for(self, subtotal: float) -> float:
        if subtotal <= 0 or subtotal > self.free_shipping_threshold:
            return 0.0
        return round(self.shipping_fee, 2)

    def total_for(self, subtotal: float, discount: float = 0.0) -> float:
        gross = subtotal + self.tax_for(subtotal) + self.shipping_for(subtotal)
        return round(max(0.0, gross - discount), 2)


class CartItem(Entity):
    """One product/variant line in a cart, priced when it was added."""

    cart_id: str = Field(description="Owning cart")
    product_id: str = Field(description="Product in the line")
    variant_id: str = Field(description="Variant whose stock is reserved")
    name: str = Field(default="", description="Product name snapshot")
    image: str | None = Field(default=None, description="Image snapshot")
    color: str | None = Field(default=None)
    size: str | None = Field(default=None)
    sku: str = Field(description="Stock keeping unit")
    quantity: int = Field(ge=1, description="Units reserved")
    price: float = Field(description="Unit price")
    original_price: float = Field(description="Unit list price")
    total_price: float = Field(default=0.0, description="price * quantity")
    is_gift: bool = Field(default=False)
    gift_message: str | None = Field(default=None)
    customization: dict[str, Any] = Field(default_factory=dict)

    def set_quantity(self, quantity: int) -> None:
        self.quantity = quantity
        self.total_price = round(self.price * quantity, 2)


class Cart(Entity):
    """A user's shopping cart and its cached totals."""

    user_id: str = Field(description="Cart owner")
    status: CartStatus = Field(default=CartStatus.ACTIVE)
    currency: str = Field(default="USD")
    payment_method: PaymentMethod = Field(default=PaymentMethod.PAYPAL)
    shipping_method: ShippingMethod = Field(default=ShippingMethod.STANDARD)
    shipping_address: dict[str, Any] | None = Field(default=None)
    notes: str | None = Field(default=None)
    estimated_delivery: datetime | None = Field(default=None)
    coupon_id: str | None = Field(default=None, description="Applied coupon")
    subtotal: float = Field(default=0.0)
    tax: float = Field(default=0.0)
    shipping: float = Field(default=0.0)
    discount: float = Field(default=0.0)
    total: float = Field(default=0.0)

    def apply_totals(
        self, items: list[CartItem], rules: PricingRules, discount: float = 0.0
    ) -> None:
        """Recompute the cached totals from the current lines."""
        subtotal = round(sum(item.price * item.quantity for item in items), 2)
        self.subtotal = subtotal
        self.tax = rules.tax_for(subtotal)
        self.shipping = rules.shipping_for(subtotal)
        self.discount = round(min(discount, subtotal + self.tax + self.shipping), 2)
        self.total = rules.total_for(subtotal, self.discount)

    def reset_totals(self) -> None:
        self.subtotal = self.tax = self.shipping = self.discount = self.total = 0.0
        self.coupon_id = None
