"""Payment, payment session and refund database table models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable, TZDateTime
from src.app.entities.service.payment.entity import (
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
)


class PaymentSessionTable(EntityTable, table=True):
    """Database persistence model for payment sessions."""

    __tablename__ = "payment_sessions"

    order_id: str = Field(foreign_key="orders.id", unique=True, index=True)
    method: PaymentMethod
    amount: float
    currency: str = "USD"
    status: PaymentStatus = PaymentStatus.PENDING
    session_id: str | None = Field(default=None, index=True)
    client_secret: str | None = None
    provider_order_id: str | None = Field(default=None, index=True)
    wallet_token: str | None = None
    expires_at: datetime | None = Field(default=None, sa_type=TZDateTime)
    details: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)


class PaymentTable(EntityTable, table=True):
    """Database persistence model for payments."""

    __tablename__ = "payments"

    order_id: str = Field(foreign_key="orders.id", index=True)
    user_id: str | None = Field(default=None, foreign_key="users.id")
    method: PaymentMethod
    provider: str
    amount: float
    currency: str = "USD"
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str | None = Field(default=None, index=True)
    refunded_amount: float = 0.0
    details: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)


class RefundTable(EntityTable, table=True):
    """Database persistence model for refunds."""

    __tablename__ = "refunds"

    payment_id: str = Field(foreign_key="payments.id", index=True)
    order_id: str = Field(foreign_key="orders.id", index=True)
    amount: float
    reason: str | None = None
    status: RefundStatus = RefundStatus.COMPLETED
    provider_refund_id: str | None = None
    processed_by: str | None = Field(default=None, foreign_key="users.id")
