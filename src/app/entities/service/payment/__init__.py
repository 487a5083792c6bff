"""Entity package: payments, payment sessions and refunds."""

from .entity import (
    PROVIDER_NAMES,
    Payment,
    PaymentMethod,
    PaymentSession,
    PaymentStatus,
    Refund,
    RefundStatus,
)
from .repository import PaymentRepository, PaymentSessionRepository, RefundRepository
from .table import PaymentSessionTable, PaymentTable, RefundTable

__all__ = [
    "PROVIDER_NAMES",
    "Payment",
    "PaymentMethod",
    "PaymentRepository",
    "PaymentSession",
    "PaymentSessionRepository",
    "PaymentSessionTable",
    "PaymentStatus",
    "PaymentTable",
    "Refund",
    "RefundRepository",
    "RefundStatus",
    "RefundTable",
]
