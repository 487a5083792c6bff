"""Payment gateway clients and the payment orchestration service."""

from .payment_service import PaymentService
from .paypal_client import PayPalClient
from .stripe_client import StripeClient

__all__ = ["PayPalClient", "PaymentService", "StripeClient"]
