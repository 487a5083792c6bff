"""Unit tests for payment orchestration with mocked gateways."""

import json
import time
from unittest.mock import AsyncMock

import pytest

from src.app.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from src.app.core.security import compute_stripe_signature
from src.app.core.services.payments import PaymentService
from src.app.entities.service.order import OrderRepository
from src.app.entities.service.order.entity import OrderStatus
from src.app.entities.service.payment import PaymentRepository
from src.app.entities.service.payment.entity import PaymentMethod, PaymentStatus
from src.app.runtime.config.config_data import ConfigData
from src.app.runtime.context import with_context

WEBHOOK_SECRET = "whsec_test"


@pytest.fixture
def stripe():
    client = AsyncMock()
    client.create_payment_intent.return_value = {
        "id": "pi_123",
        "client_secret": "pi_123_secret",
        "status": "requires_confirmation",
    }
    client.retrieve_payment_intent.return_value = {"id": "pi_123", "status": "succeeded"}
    client.create_refund.return_value = {"id": "re_1"}
    return client


@pytest.fixture
def paypal():
    client = AsyncMock()
    client.create_order.return_value = {
        "id": "PP-ORDER",
        "status": "CREATED",
        "links": [{"rel": "approve", "href": "https://paypal.test/approve"}],
    }
    client.capture_order.return_value = {
        "status": "COMPLETED",
        "purchase_units": [{"payments": {"captures": [{"id": "CAPTURE-1"}]}}],
    }
    client.refund_capture.return_value = {"id": "PP-REFUND"}
    return client


@pytest.fixture
def payments(session, stripe, paypal):
    return PaymentService(session, paypal=paypal, stripe=stripe)


class TestCashOnDelivery:
    def test_process_confirms_order(self, session, user, product, place_order, payments):
        order = place_order(user, product).order

        payment_session = payments.process_cod(user, order.id)

        assert payment_session.method == PaymentMethod.COD
        assert payment_session.status == PaymentStatus.PENDING
        assert payment_session.amount == 54.0
        assert OrderRepository(session).get(order.id).status == OrderStatus.CONFIRMED

    def test_confirm_marks_paid_and_delivered(
        self, session, user, product, place_order, payments
    ):
        order = place_order(user, product).order
        payments.process_cod(user, order.id)

        payment_session = payments.confirm_cod(order.id)

        assert payment_session.status == PaymentStatus.COMPLETED
        saved = OrderRepository(session).get(order.id)
        assert saved.payment_status == PaymentStatus.COMPLETED
        assert saved.transaction_id == f"COD_{order.id}"
        assert saved.is_delivered
        [payment] = PaymentRepository(session).list_for_order(order.id)
        assert payment.provider == "Cash on Delivery"
        assert payment.amount == 54.0

    def test_confirm_without_session(self, session, user, product, place_order, payments):
        order = place_order(user, product).order
        with pytest.raises(NotFoundError):
            payments.confirm_cod(order.id)

    def test_paid_order_cannot_be_paid_again(
        self, session, user, product, place_order, payments
    ):
        order = place_order(user, product).order
        payments.process_cod(user, order.id)
        payments.confirm_cod(order.id)

        with pytest.raises(ValidationError, match="already been paid"):
            payments.process_cod(user, order.id)

    def test_other_users_order(self, session, user, make_user, product, place_order, payments):
        order = place_order(user, product).order
        stranger = make_user(email="stranger@example.com")
        with pytest.raises(PermissionDeniedError):
            payments.process_cod(stranger, order.id)


class TestStripe:
    async def test_intent_then_confirm(
        self, session, user, product, place_order, payments, stripe
    ):
        order = place_order(user, product, method=PaymentMethod.STRIPE).order

        created = await payments.create_stripe_intent(user, order.id, "usd")
        assert created.session_id == "pi_123"
        assert created.client_secret == "pi_123_secret"
        assert created.status == PaymentStatus.PENDING
        stripe.create_payment_intent.assert_awaited_once()
        assert stripe.create_payment_intent.await_args.args[:2] == (5400, "USD")

        confirmed = await payments.confirm_stripe_payment(user, "pi_123")

        assert confirmed.status == PaymentStatus.COMPLETED
        saved = OrderRepository(session).get(order.id)
        assert saved.payment_status == PaymentStatus.COMPLETED
        assert saved.transaction_id == "pi_123"

    async def test_failed_intent(self, session, user, product, place_order, payments, stripe):
        order = place_order(user, product, method=PaymentMethod.STRIPE).order
        await payments.create_stripe_intent(user, order.id)
        stripe.confirm_payment_intent.return_value = {
            "id": "pi_123",
            "status": "requires_payment_method",
        }

        result = await payments.confirm_stripe_payment(user, "pi_123", "pm_card_declined")

        assert result.status == PaymentStatus.FAILED
        assert PaymentRepository(session).list_for_order(order.id) == []

    async def test_unsupported_currency(self, session, user, product, place_order, payments):
        order = place_order(user, product).order
        with pytest.raises(ValidationError, match="Unsupported currency"):
            await payments.create_stripe_intent(user, order.id, "XYZ")

    async def test_google_pay_requires_token(
        self, session, user, product, place_order, payments
    ):
        order = place_order(user, product).order
        with pytest.raises(ValidationError, match="Google Pay"):
            await payments.process_google_pay(user, order.id, {"paymentMethodData": {}})

    async def test_google_pay_success(
        self, session, user, product, place_order, payments, stripe
    ):
        order = place_order(user, product, method=PaymentMethod.GOOGLE_PAY).order
        stripe.create_payment_intent.return_value = {"id": "pi_gp", "status": "succeeded"}
        data = {"paymentMethodData": {"tokenizationData": {"token": "tok_gp"}}}

        result = await payments.process_google_pay(user, order.id, data)

        assert result.status == PaymentStatus.COMPLETED
        assert result.wallet_token == "tok_gp"
        assert stripe.create_payment_intent.await_args.kwargs["confirm"] is True

    async def test_cancel_session(self, session, user, product, place_order, payments, stripe):
        order = place_order(user, product, method=PaymentMethod.STRIPE).order
        await payments.create_stripe_intent(user, order.id)

        cancelled = await payments.cancel_session(user, order.id)

        assert cancelled.status == PaymentStatus.FAILED
        stripe.cancel_payment_intent.assert_awaited_once_with("pi_123")


class TestPayPal:
    async def test_create_and_capture(
        self, session, user, product, place_order, payments, paypal
    ):
        order = place_order(user, product, method=PaymentMethod.PAYPAL).order

        created = await payments.create_paypal_order(user, order.id)
        assert created.provider_order_id == "PP-ORDER"
        assert created.details["approval_url"] == "https://paypal.test/approve"

        captured = await payments.capture_paypal_order(user, "PP-ORDER")

        assert captured.status == PaymentStatus.COMPLETED
        [payment] = PaymentRepository(session).list_for_order(order.id)
        assert payment.transaction_id == "CAPTURE-1"

    async def test_capture_unknown_order(self, session, user, payments):
        with pytest.raises(NotFoundError):
            await payments.capture_paypal_order(user, "UNKNOWN")

    async def test_webhook_rejects_bad_signature(self, session, payments, paypal):
        paypal.verify_webhook_signature.return_value = False
        with pytest.raises(ValidationError, match="Invalid PayPal webhook signature"):
            await payments.handle_paypal_webhook({}, {"event_type": "PAYMENT.CAPTURE.COMPLETED"})

    async def test_webhook_completes_capture(
        self, session, user, product, place_order, payments, paypal
    ):
        order = place_order(user, product, method=PaymentMethod.PAYPAL).order
        await payments.create_paypal_order(user, order.id)
        paypal.verify_webhook_signature.return_value = True
        event = {
            "event_type": "PAYMENT.CAPTURE.COMPLETED",
            "resource": {
                "id": "CAPTURE-9",
                "supplementary_data": {"related_ids": {"order_id": "PP-ORDER"}},
            },
        }

        assert await payments.handle_paypal_webhook({}, event) == "PAYMENT.CAPTURE.COMPLETED"
        assert OrderRepository(session).get(order.id).transaction_id == "CAPTURE-9"


class TestRefunds:
    async def _paid_stripe_order(self, user, product, place_order, payments):
        order = place_order(user, product, method=PaymentMethod.STRIPE).order
        await payments.create_stripe_intent(user, order.id)
        await payments.confirm_stripe_payment(user, "pi_123")
        return order

    async def test_partial_then_full_refund(
        self, session, user, admin, product, place_order, payments, stripe
    ):
        order = await self._paid_stripe_order(user, product, place_order, payments)
        [payment] = PaymentRepository(session).list_for_order(order.id)

        first = await payments.refund(admin, payment.id, 20, "damaged")
        assert first.amount == 20.0
        assert first.provider_refund_id == "re_1"
        stripe.create_refund.assert_awaited_with("pi_123", 2000, "damaged")
        assert OrderRepository(session).get(order.id).payment_status == PaymentStatus.COMPLETED

        second = await payments.refund(admin, payment.id)
        assert second.amount == 34.0
        assert PaymentRepository(session).get(payment.id).status == PaymentStatus.REFUNDED
        assert OrderRepository(session).get(order.id).payment_status == PaymentStatus.REFUNDED

    async def test_refund_cannot_exceed_remaining(
        self, session, admin, user, product, place_order, payments
    ):
        order = await self._paid_stripe_order(user, product, place_order, payments)
        [payment] = PaymentRepository(session).list_for_order(order.id)

        with pytest.raises(ValidationError, match="cannot exceed 54.00"):
            await payments.refund(admin, payment.id, 60)

    async def test_refund_after_full_refund(
        self, session, admin, user, product, place_order, payments
    ):
        order = await self._paid_stripe_order(user, product, place_order, payments)
        [payment] = PaymentRepository(session).list_for_order(order.id)
        await payments.refund(admin, payment.id)

        with pytest.raises(ValidationError, match="fully refunded"):
            await payments.refund(admin, payment.id, 1)

    async def test_cod_refund_is_local(self, session, admin, user, product, place_order, payments):
        order = place_order(user, product).order
        payments.process_cod(user, order.id)
        payments.confirm_cod(order.id)
        [payment] = PaymentRepository(session).list_for_order(order.id)

        refund = await payments.refund(admin, payment.id, 10)

        assert refund.provider_refund_id.startswith("COD_REFUND_")


class TestStripeWebhook:
    @pytest.fixture
    def webhook_config(self):
        override = ConfigData()
        override.payments.stripe.webhook_secret = WEBHOOK_SECRET
        with with_context(override):
            yield

    @staticmethod
    def _signed(body: dict) -> tuple[bytes, str]:
        payload = json.dumps(body).encode()
        timestamp = int(time.time())
        signature = compute_stripe_signature(payload, WEBHOOK_SECRET, timestamp)
        return payload, f"t={timestamp},v1={signature}"

    async def test_succeeded_event_records_payment(
        self, session, user, product, place_order, stripe, paypal, webhook_config
    ):
        payments = PaymentService(session, paypal=paypal, stripe=stripe)
        order = place_order(user, product, method=PaymentMethod.STRIPE).order
        await payments.create_stripe_intent(user, order.id)
        payload, header = self._signed(
            {"type": "payment_intent.succeeded", "data": {"object": {"id": "pi_123"}}}
        )

        assert payments.handle_stripe_webhook(payload, header) == "payment_intent.succeeded"
        assert OrderRepository(session).get(order.id).payment_status == PaymentStatus.COMPLETED

    def test_unknown_intent_is_ignored(self, session, stripe, paypal, webhook_config):
        payments = PaymentService(session, paypal=paypal, stripe=stripe)
        payload, header = self._signed(
            {"type": "payment_intent.succeeded", "data": {"object": {"id": "pi_other"}}}
        )
        assert payments.handle_stripe_webhook(payload, header) == "payment_intent.succeeded"

    def test_bad_signature(self, session, stripe, paypal, webhook_config):
        payments = PaymentService(session, paypal=paypal, stripe=stripe)
        payload = b'{"type": "payment_intent.succeeded"}'
        with pytest.raises(ValidationError, match="Invalid Stripe signature"):
            payments.handle_stripe_webhook(payload, "t=1,v1=deadbeef")

    def test_missing_secret(self, session, payments):
        with pytest.raises(ValidationError, match="not configured"):
            payments.handle_stripe_webhook(b"{}", "t=1,v1=x")
