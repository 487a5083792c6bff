"""Entities: Payment, PaymentSession and Refund."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from src.app.entities.core._base import Entity, utc_now


class PaymentMethod(str, Enum):
    PAYPAL = "PAYPAL"
    STRIPE = "STRIPE"
    GOOGLE_PAY = "GOOGLE_PAY"
    COD = "COD"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


PROVIDER_NAMES: dict[PaymentMethod, str] = {
    PaymentMethod.PAYPAL: "PayPal",
    PaymentMethod.STRIPE: "Stripe",
    PaymentMethod.GOOGLE_PAY: "Google Pay",
    PaymentMethod.COD: "Cash on Delivery",
}


class PaymentSession(Entity):
    """The in-flight checkout attempt for an order; one per order."""

    order_id: str = Field(description="Order being paid")
    method: PaymentMethod = Field(description="Payment method")
    amount: float = Field(description="Amount to collect")
    currency: str = Field(default="USD", description="ISO currency code")
    status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    session_id: str | None = Field(
        default=None, description="Provider object id (PayPal order, Stripe intent)"
    )
    client_secret: str | None = Field(default=None, description="Stripe client secret")
    provider_order_id: str | None = Field(default=None, description="PayPal order id")
    wallet_token: str | None = Field(default=None, description="Google Pay token")
    expires_at: datetime | None = Field(default=None, description="Session expiry")
    details: dict[str, Any] = Field(default_factory=dict, description="Provider payload")

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at < utc_now()


class Payment(Entity):
    """A settled (or failed) payment against an order."""

    order_id: str = Field(description="Paid order")
    user_id: str | None = Field(default=None, description="Paying user")
    method: PaymentMethod = Field(description="Payment method")
    provider: str = Field(description="Provider display name")
    amount: float = Field(description="Captured amount")
    currency: str = Field(default="USD")
    status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    transaction_id: str | None = Field(default=None, description="Provider transaction id")
    refunded_amount: float = Field(default=0.0, description="Total refunded so far")
    details: dict[str, Any] = Field(default_factory=dict, description="Provider payload")

    @property
    def refundable_amount(self) -> float:
        return round(self.amount - self.refunded_amount, 2)

    def apply_refund(self, amount: float) -> None:
        self.refunded_amount = round(self.refunded_amount + amount, 2)
        if self.refunded_amount >= self.amount:
            self.status = PaymentStatus.REFUNDED


class RefundStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Refund(Entity):
    """Money returned to the customer for a payment."""

    payment_id: str = Field(description="Refunded payment")
    order_id: str = Field(description="Order of the refunded payment")
    amount: float = Field(gt=0, description="Refunded amount")
    reason: str | None = Field(default=None, description="Why the refund was issued")
    status: RefundStatus = Field(default=RefundStatus.COMPLETED)
    provider_refund_id: str | None = Field(default=None, description="Provider refund id")
    processed_by: str | None = Field(default=None, description="Admin who refunded")
