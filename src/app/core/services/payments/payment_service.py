"""Payment orchestration across PayPal, Stripe, Google Pay and cash on delivery.

Gateway calls are made through the REST clients in this package. Every state
change is written through the request session; the router commits.
"""

import json
import time
from datetime import timedelta
from typing import Any

from loguru import logger
from sqlmodel import Session

from src.app.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from src.app.core.security import verify_stripe_signature
from src.app.core.services.notification import NotificationService, templates
from src.app.core.services.payments.gateway import to_minor_units
from src.app.core.services.payments.paypal_client import (
    PayPalClient,
    approval_link,
    capture_id,
)
from src.app.core.services.payments.stripe_client import StripeClient
from src.app.entities.core._base import utc_now
from src.app.entities.core.user.entity import User
from src.app.entities.service.order.entity import Order, OrderStatus
from src.app.entities.service.order.repository import OrderRepository
from src.app.entities.service.payment.entity import (
    PROVIDER_NAMES,
    Payment,
    PaymentMethod,
    PaymentSession,
    PaymentStatus,
    Refund,
)
from src.app.entities.service.payment.repository import (
    PaymentRepository,
    PaymentSessionRepository,
    RefundRepository,
)
from src.app.runtime.context import get_config

STRIPE_METHODS = frozenset({PaymentMethod.STRIPE, PaymentMethod.GOOGLE_PAY})

# Stripe PaymentIntent status -> session status
STRIPE_STATUS_MAP = {
    "succeeded": PaymentStatus.COMPLETED,
    "requires_payment_method": PaymentStatus.FAILED,
    "canceled": PaymentStatus.FAILED,
}


class PaymentService:
    def __init__(
        self,
        db_session: Session,
        paypal: PayPalClient | None = None,
        stripe: StripeClient | None = None,
    ):
        self._paypal = paypal or PayPalClient()
        self._stripe = stripe or StripeClient()
        self._sessions = PaymentSessionRepository(db_session)
        self._payments = PaymentRepository(db_session)
        self._refunds = RefundRepository(db_session)
        self._orders = OrderRepository(db_session)
        self._notifications = NotificationService(db_session)
        self._config = get_config().payments

    # PayPal

    async def create_paypal_order(
        self,
        user: User,
        order_id: str,
        currency: str = "USD",
        return_url: str | None = None,
        cancel_url: str | None = None,
    ) -> PaymentSession:
        currency = self._check_currency(currency)
        order = self._payable_order(user, order_id)

        paypal_order = await self._paypal.create_order(
            order.total_price, currency, order.id, return_url, cancel_url
        )
        session = self._open_session(
            order,
            PaymentMethod.PAYPAL,
            currency,
            session_id=paypal_order.get("id"),
            provider_order_id=paypal_order.get("id"),
            details={
                "approval_url": approval_link(paypal_order),
                "paypal_status": paypal_order.get("status"),
            },
        )
        logger.bind(order_id=order.id, provider_order_id=session.provider_order_id).info(
            "payment.paypal_order_created"
        )
        return session

    async def capture_paypal_order(self, user: User, provider_order_id: str) -> PaymentSession:
        session = self._sessions.get_by_provider_order_id(provider_order_id)
        if session is None:
            raise NotFoundError("Payment session not found")
        order = self._accessible_order(user, session.order_id)

        result = await self._paypal.capture_order(provider_order_id)
        session.details = {**session.details, "capture": result}
        if result.get("status") == "COMPLETED":
            return self._complete(
                session,
                order,
                transaction_id=capture_id(result) or provider_order_id,
                details={"capture_status": result.get("status")},
            )
        return self._fail(session, order)

    # Stripe and Google Pay

    async def create_stripe_intent(
        self, user: User, order_id: str, currency: str = "USD"
    ) -> PaymentSession:
        currency = self._check_currency(currency)
        order = self._payable_order(user, order_id)

        intent = await self._stripe.create_payment_intent(
            to_minor_units(order.total_price, currency),
            currency,
            metadata={"order_id": order.id, "order_number": order.order_number},
        )
        session = self._open_session(
            order,
            PaymentMethod.STRIPE,
            currency,
            session_id=intent.get("id"),
            client_secret=intent.get("client_secret"),
            details={"intent_status": intent.get("status")},
        )
        logger.bind(order_id=order.id, intent_id=session.session_id).info(
            "payment.stripe_intent_created"
        )
        return session

    async def confirm_stripe_payment(
        self, user: User, intent_id: str, payment_method: str | None = None
    ) -> PaymentSession:
        session = self._sessions.get_by_session_id(intent_id)
        if session is None:
            raise NotFoundError("Payment session not found")
        order = self._accessible_order(user, session.order_id)

        if payment_method:
            intent = await self._stripe.confirm_payment_intent(intent_id, payment_method)
        else:
            intent = await self._stripe.retrieve_payment_intent(intent_id)
        return self._apply_intent(session, order, intent)

    async def process_google_pay(
        self, user: User, order_id: str, payment_data: dict[str, Any], currency: str = "USD"
    ) -> PaymentSession:
        currency = self._check_currency(currency)
        token = (
            (payment_data.get("paymentMethodData") or {})
            .get("tokenizationData", {})
            .get("token")
        )
        if not token:
            raise ValidationError("Invalid Google Pay payment data")
        order = self._payable_order(user, order_id)

        intent = await self._stripe.create_payment_intent(
            to_minor_units(order.total_price, currency),
            currency,
            metadata={"order_id": order.id, "wallet": "google_pay"},
            payment_method=token,
            confirm=True,
        )
        session = self._open_session(
            order,
            PaymentMethod.GOOGLE_PAY,
            currency,
            session_id=intent.get("id"),
            client_secret=intent.get("client_secret"),
            wallet_token=token,
        )
        return self._apply_intent(session, order, intent)

    # Cash on delivery

    def process_cod(self, user: User, order_id: str) -> PaymentSession:
        order = self._payable_order(user, order_id)
        session = self._open_session(
            order,
            PaymentMethod.COD,
            get_config().commerce.currency,
            expires_in=timedelta(days=self._config.cod_session_ttl_days),
        )
        order.status = OrderStatus.CONFIRMED
        order.payment_method = PaymentMethod.COD
        self._orders.update(order)
        logger.bind(order_id=order.id).info("payment.cod_selected")
        return session

    def confirm_cod(self, order_id: str) -> PaymentSession:
        session = self._sessions.get_for_order(order_id)
        if session is None:
            raise NotFoundError("Payment session not found")
        if session.method != PaymentMethod.COD:
            raise ValidationError("Order is not a cash on delivery order")
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")

        session = self._complete(session, order, transaction_id=f"COD_{order.id}")
        order = self._orders.get(order_id) or order
        order.mark_delivered()
        self._orders.update(order)
        return session

    # Sessions

    def get_session(self, user: User, order_id: str) -> PaymentSession:
        self._accessible_order(user, order_id)
        session = self._sessions.get_for_order(order_id)
        if session is None:
            raise NotFoundError("Payment session not found")
        return session

    async def cancel_session(self, user: User, order_id: str) -> PaymentSession:
        session = self.get_session(user, order_id)
        if session.status == PaymentStatus.COMPLETED:
            raise ValidationError("Completed payments cannot be cancelled")
        if session.method in STRIPE_METHODS and session.session_id:
            await self._stripe.cancel_payment_intent(session.session_id)
        session.status = PaymentStatus.FAILED
        session = self._sessions.update(session)
        logger.bind(order_id=order_id).info("payment.session_cancelled")
        return session

    # Refunds

    async def refund(
        self,
        admin: User,
        payment_id: str,
        amount: float | None = None,
        reason: str | None = None,
    ) -> Refund:
        payment = self._payments.get(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        refundable = payment.refundable_amount
        if payment.status == PaymentStatus.REFUNDED or refundable <= 0:
            raise ValidationError("Payment has already been fully refunded")
        amount = round(amount if amount is not None else refundable, 2)
        if amount <= 0:
            raise ValidationError("Refund amount must be greater than 0")
        if amount > refundable:
            raise ValidationError(f"Refund amount cannot exceed {refundable:.2f}")

        provider_refund_id = await self._refund_with_provider(payment, amount, reason)
        refund = self._refunds.create(
            Refund(
                payment_id=payment.id,
                order_id=payment.order_id,
                amount=amount,
                reason=reason,
                provider_refund_id=provider_refund_id,
                processed_by=admin.id,
            )
        )
        payment.apply_refund(amount)
        payment = self._payments.update(payment)

        order = self._orders.get(payment.order_id)
        if order is not None:
            if payment.status == PaymentStatus.REFUNDED:
                order.payment_status = PaymentStatus.REFUNDED
                order = self._orders.update(order)
            self._notifications.notify_order(order, templates.refund_approved(order, amount))

        logger.bind(payment_id=payment.id, refund_id=refund.id, amount=amount).info(
            "payment.refunded"
        )
        return refund

    async def _refund_with_provider(
        self, payment: Payment, amount: float, reason: str | None
    ) -> str:
        if payment.method in STRIPE_METHODS:
            if not payment.transaction_id:
                raise ValidationError("Payment has no Stripe transaction to refund")
            result = await self._stripe.create_refund(
                payment.transaction_id, to_minor_units(amount, payment.currency), reason
            )
            return str(result.get("id"))
        if payment.method == PaymentMethod.PAYPAL:
            if not payment.transaction_id:
                raise ValidationError("Payment has no PayPal capture to refund")
            result = await self._paypal.refund_capture(
                payment.transaction_id, amount, payment.currency
            )
            return str(result.get("id"))
        return f"COD_REFUND_{int(time.time() * 1000)}"

    # Webhooks

    def handle_stripe_webhook(self, payload: bytes, signature: str | None) -> str:
        stripe_cfg = self._config.stripe
        if not stripe_cfg.webhook_secret:
            raise ValidationError("Stripe webhook secret is not configured")
        if not signature or not verify_stripe_signature(
            payload,
            signature,
            stripe_cfg.webhook_secret,
            tolerance_seconds=stripe_cfg.webhook_tolerance_seconds,
        ):
            raise ValidationError("Invalid Stripe signature")

        try:
            event = json.loads(payload)
        except ValueError as exc:
            raise ValidationError("Invalid webhook payload") from exc

        event_type = event.get("type", "")
        intent = (event.get("data") or {}).get("object") or {}
        session = self._sessions.get_by_session_id(intent.get("id", ""))
        if session is None:
            logger.bind(event_type=event_type).info("payment.webhook_ignored")
            return event_type

        order = self._orders.get(session.order_id)
        if order is None:
            return event_type
        if event_type == "payment_intent.succeeded":
            self._complete(session, order, transaction_id=intent.get("id"))
        elif event_type == "payment_intent.payment_failed":
            self._fail(session, order)
        logger.bind(event_type=event_type, order_id=order.id).info("payment.stripe_webhook")
        return event_type

    async def handle_paypal_webhook(self, headers: dict[str, str], event: dict[str, Any]) -> str:
        if not await self._paypal.verify_webhook_signature(headers, event):
            raise ValidationError("Invalid PayPal webhook signature")

        event_type = event.get("event_type", "")
        resource = event.get("resource") or {}
        related = (resource.get("supplementary_data") or {}).get("related_ids") or {}
        provider_order_id = related.get("order_id") or resource.get("id", "")
        session = self._sessions.get_by_provider_order_id(provider_order_id)
        if session is None:
            logger.bind(event_type=event_type).info("payment.webhook_ignored")
            return event_type

        order = self._orders.get(session.order_id)
        if order is None:
            return event_type
        if event_type == "PAYMENT.CAPTURE.COMPLETED":
            self._complete(session, order, transaction_id=resource.get("id"))
        elif event_type == "PAYMENT.CAPTURE.DENIED":
            self._fail(session, order)
        logger.bind(event_type=event_type, order_id=order.id).info("payment.paypal_webhook")
        return event_type

    # Internals

    def record_payment(
        self,
        order: Order,
        method: PaymentMethod,
        amount: float,
        currency: str,
        transaction_id: str | None,
        details: dict[str, Any] | None = None,
    ) -> Payment:
        """Store a completed payment and mark the order paid (idempotent per transaction)."""
        if transaction_id:
            existing = self._payments.get_by_transaction_id(transaction_id)
            if existing is not None:
                return existing

        payment = self._payments.create(
            Payment(
                order_id=order.id,
                user_id=order.user_id,
                method=method,
                provider=PROVIDER_NAMES[method],
                amount=amount,
                currency=currency,
                status=PaymentStatus.COMPLETED,
                transaction_id=transaction_id,
                details=details or {},
            )
        )
        order.payment_status = PaymentStatus.COMPLETED
        order.transaction_id = transaction_id
        order = self._orders.update(order)
        self._notifications.notify_order(order, templates.payment_success(order, amount))
        logger.bind(
            order_id=order.id, payment_id=payment.id, method=method.value, amount=amount
        ).info("payment.recorded")
        return payment

    def _complete(
        self,
        session: PaymentSession,
        order: Order,
        transaction_id: str | None,
        details: dict[str, Any] | None = None,
    ) -> PaymentSession:
        session.status = PaymentStatus.COMPLETED
        session = self._sessions.update(session)
        self.record_payment(
            order, session.method, session.amount, session.currency, transaction_id, details
        )
        return session

    def _fail(self, session: PaymentSession, order: Order) -> PaymentSession:
        session.status = PaymentStatus.FAILED
        session = self._sessions.update(session)
        self._notifications.notify_order(order, templates.payment_failed(order))
        logger.bind(order_id=order.id, method=session.method.value).info("payment.failed")
        return session

    def _apply_intent(
        self, session: PaymentSession, order: Order, intent: dict[str, Any]
    ) -> PaymentSession:
        intent_status = intent.get("status", "")
        session.details = {**session.details, "intent_status": intent_status}
        status = STRIPE_STATUS_MAP.get(intent_status, PaymentStatus.PENDING)
        if status == PaymentStatus.COMPLETED:
            return self._complete(session, order, transaction_id=intent.get("id"))
        if status == PaymentStatus.FAILED:
            return self._fail(session, order)
        session.status = PaymentStatus.PENDING
        return self._sessions.update(session)

    def _open_session(
        self,
        order: Order,
        method: PaymentMethod,
        currency: str,
        *,
        expires_in: timedelta | None = None,
        **fields: Any,
    ) -> PaymentSession:
        ttl = expires_in or timedelta(hours=self._config.session_ttl_hours)
        return self._sessions.upsert(
            PaymentSession(
                order_id=order.id,
                method=method,
                amount=order.total_price,
                currency=currency,
                status=PaymentStatus.PENDING,
                expires_at=utc_now() + ttl,
                **fields,
            )
        )

    def _check_currency(self, currency: str) -> str:
        currency = (currency or "").upper()
        if currency not in self._config.supported_currencies:
            raise ValidationError(f"Unsupported currency: {currency}")
        return currency

    def _accessible_order(self, user: User, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if order.user_id != user.id and not user.is_admin:
            raise PermissionDeniedError("You do not have access to this order")
        return order

    def _payable_order(self, user: User, order_id: str) -> Order:
        order = self._accessible_order(user, order_id)
        if order.status == OrderStatus.CANCELLED:
            raise ValidationError("Cancelled orders cannot be paid")
        if order.payment_status == PaymentStatus.COMPLETED:
            raise ValidationError("Order has already been paid")
        if order.total_price <= 0:
            raise ValidationError("Order amount must be greater than 0")
        return order
