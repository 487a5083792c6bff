"""Unit tests for the transactional email client."""

import json

import httpx

from src.app.core.services.email import EmailClient
from src.app.core.services.email.email_client import (
    EmailMessage,
    order_confirmation_email,
    send_order_confirmation,
)
from src.app.runtime.config.config_data import EmailConfig

CONFIG = EmailConfig(
    api_url="https://mail.test/send",
    api_key="mail-key",
    from_address="shop@example.com",
)
MESSAGE = EmailMessage(to="buyer@example.com", subject="Hello", text="Body")


class TestEmailClient:
    async def test_posts_message(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "msg_1"})

        client = EmailClient(CONFIG, transport=httpx.MockTransport(handler))

        assert await client.send(MESSAGE, idempotency_key="key-1") is True

        [request] = seen
        assert str(request.url) == "https://mail.test/send"
        assert request.headers["Authorization"] == "Bearer mail-key"
        assert request.headers["Idempotency-Key"] == "key-1"
        assert json.loads(request.content) == {
            "from": "shop@example.com",
            "to": ["buyer@example.com"],
            "subject": "Hello",
            "text": "Body",
        }

    async def test_provider_error_returns_false(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        assert await EmailClient(CONFIG, transport=transport).send(MESSAGE) is False

    async def test_unreachable_provider_returns_false(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = httpx.MockTransport(handler)
        assert await EmailClient(CONFIG, transport=transport).send(MESSAGE) is False

    async def test_unconfigured_client_skips(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        client = EmailClient(EmailConfig(), transport=httpx.MockTransport(handler))
        assert not client.is_configured
        assert await client.send(MESSAGE) is False


class TestOrderConfirmation:
    def test_lists_items_and_totals(self, user, product, place_order, make_coupon):
        make_coupon("TEN")
        detail = place_order(user, product, coupon_code="TEN")

        message = order_confirmation_email(user.email, detail.order, detail.items)

        assert message.subject == f"Order confirmation {detail.order.order_number}"
        assert "- Trail Runner x1: 40.00" in message.text
        assert "Discount: -4.00" in message.text
        assert message.text.endswith("Total: 50.00")

    async def test_sends_through_given_client(self, user, product, place_order):
        detail = place_order(user, product)
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        client = EmailClient(CONFIG, transport=httpx.MockTransport(handler))

        assert await send_order_confirmation(client, user.email, detail.order, detail.items)

        [request] = seen
        assert request.headers["Idempotency-Key"] == f"order-confirmation-{detail.order.id}"
        assert json.loads(request.content)["to"] == [user.email]
