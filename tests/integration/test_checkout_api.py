"""Cart to delivered order over HTTP, paying cash on delivery."""

import json
from datetime import timedelta

import httpx
import pytest

from src.app.api.http.app import app
from src.app.core.services.email import EmailClient
from src.app.entities.core._base import utc_now
from src.app.entities.service.payment import PaymentRepository
from src.app.runtime.config.config_data import EmailConfig
from tests.fixtures.commerce import SHIPPING_ADDRESS


@pytest.fixture
def cart_line(user_client, product):
    response = user_client.post(
        "/api/cart/items",
        json={
            "product_id": product.product.id,
            "variant_id": product.variants[0].id,
            "quantity": 1,
        },
    )
    assert response.status_code == 201
    return response.json()["data"]["items"][0]


@pytest.fixture
def order(user_client, cart_line):
    response = user_client.post(
        "/api/orders",
        json={"payment_method": "COD", "shipping_address": SHIPPING_ADDRESS},
    )
    assert response.status_code == 201
    return response.json()["data"]["order"]


class TestCart:
    def test_totals(self, user_client, cart_line):
        summary = user_client.get("/api/cart").json()["data"]

        assert summary["item_count"] == 1
        assert summary["subtotal"] == 40.0
        assert summary["tax"] == 4.0
        assert summary["shipping"] == 10.0
        assert summary["total"] == 54.0

    def test_quantity_change_and_removal(self, user_client, cart_line):
        updated = user_client.patch(f"/api/cart/items/{cart_line['id']}", json={"quantity": 2})
        assert updated.json()["data"]["total"] == 98.0

        emptied = user_client.delete(f"/api/cart/items/{cart_line['id']}")
        assert emptied.json()["data"]["item_count"] == 0

    def test_more_than_in_stock(self, user_client, product):
        response = user_client.post(
            "/api/cart/items",
            json={
                "product_id": product.product.id,
                "variant_id": product.variants[0].id,
                "quantity": 11,
            },
        )
        assert response.status_code == 400

    def test_coupon(self, user_client, cart_line, make_coupon):
        make_coupon("SAVE10")

        applied = user_client.post("/api/cart/coupon", json={"code": "save10"})
        assert applied.json()["data"]["coupon_code"] == "SAVE10"
        assert applied.json()["data"]["total"] == 50.0

        removed = user_client.delete("/api/cart/coupon")
        assert removed.json()["data"]["coupon_code"] is None
        assert removed.json()["data"]["total"] == 54.0

    def test_requires_login(self, client):
        assert client.get("/api/cart").status_code == 401


class TestOrders:
    def test_create_empties_cart(self, user_client, order):
        assert order["total_price"] == 54.0
        assert order["status"] == "PENDING"
        assert user_client.get("/api/cart").json()["data"]["item_count"] == 0

    def test_empty_cart(self, user_client, user):
        response = user_client.post(
            "/api/orders",
            json={"payment_method": "COD", "shipping_address": SHIPPING_ADDRESS},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Cart is empty"

    def test_confirmation_email_uses_app_email_client(self, user_client, user, cart_line):
        sent: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content))
            return httpx.Response(200)

        app.state.app_dependencies.email_client = EmailClient(
            EmailConfig(api_url="https://mail.test/send", api_key="mail-key"),
            transport=httpx.MockTransport(handler),
        )

        response = user_client.post(
            "/api/orders",
            json={"payment_method": "COD", "shipping_address": SHIPPING_ADDRESS},
        )

        assert response.status_code == 201
        order_number = response.json()["data"]["order"]["order_number"]
        [payload] = sent
        assert payload["to"] == [user.email]
        assert payload["subject"] == f"Order confirmation {order_number}"

    def test_list_and_get(self, user_client, order):
        listing = user_client.get("/api/orders").json()
        assert [o["id"] for o in listing["data"]] == [order["id"]]
        assert listing["pagination"]["total"] == 1

        detail = user_client.get(f"/api/orders/{order['id']}").json()["data"]
        assert detail["items"][0]["quantity"] == 1

    def test_public_tracking(self, client, order):
        client.cookies.clear()
        response = client.get(f"/api/orders/track/{order['order_number']}")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "PENDING"
        assert response.json()["data"]["shipments"] == []

    def test_cancel(self, user_client, order, product):
        response = user_client.post(
            f"/api/orders/{order['id']}/cancel", json={"reason": "Changed my mind"}
        )

        assert response.json()["data"]["status"] == "CANCELLED"
        inventory = user_client.get(f"/api/products/{product.product.id}/inventory")
        assert inventory.json()["data"]["quantity"] == 10

    def test_status_change_requires_admin(self, user_client, admin_client, order):
        url = f"/api/orders/{order['id']}/status"
        assert user_client.patch(url, json={"status": "PROCESSING"}).status_code == 403

        response = admin_client.patch(url, json={"status": "PROCESSING"})
        assert response.json()["data"]["status"] == "PROCESSING"


class TestCashOnDeliveryFlow:
    def test_pay_ship_refund(self, session, user_client, admin_client, order):
        order_id = order["id"]

        selected = user_client.post("/api/payments/cod", json={"order_id": order_id})
        assert selected.status_code == 200
        assert selected.json()["data"]["status"] == "PENDING"
        assert user_client.get(f"/api/payments/sessions/{order_id}").json()["data"][
            "method"
        ] == "COD"

        confirmed = admin_client.post(f"/api/payments/cod/{order_id}/confirm")
        assert confirmed.json()["data"]["status"] == "COMPLETED"

        [payment] = PaymentRepository(session).list_for_order(order_id)
        refund = admin_client.post(
            "/api/payments/refunds",
            json={"payment_id": payment.id, "amount": 4.0, "reason": "Late delivery"},
        )
        assert refund.status_code == 201
        assert refund.json()["data"]["amount"] == 4.0

        too_much = admin_client.post(
            "/api/payments/refunds", json={"payment_id": payment.id, "amount": 100.0}
        )
        assert too_much.status_code == 400

    def test_confirm_is_admin_only(self, user_client, order):
        response = user_client.post(f"/api/payments/cod/{order['id']}/confirm")
        assert response.status_code == 403

    def test_stripe_webhook_without_secret(self, client):
        response = client.post(
            "/api/payments/webhooks/stripe",
            content=b"{}",
            headers={"Stripe-Signature": "t=1,v1=abc"},
        )
        assert response.status_code == 400


class TestShipments:
    def test_ship_and_deliver(self, user_client, admin_client, order):
        created = admin_client.post(
            "/api/shipments",
            json={
                "order_id": order["id"],
                "carrier": "DHL",
                "estimated_delivery": (utc_now() + timedelta(days=3)).isoformat(),
            },
        )
        assert created.status_code == 201
        shipment = created.json()["data"]
        assert shipment["tracking_number"].startswith("DHL-")

        tracking = user_client.get(f"/api/orders/track/{order['order_number']}").json()["data"]
        assert tracking["status"] == "SHIPPED"
        assert [s["id"] for s in tracking["shipments"]] == [shipment["id"]]

        admin_client.patch(f"/api/shipments/{shipment['id']}", json={"status": "DELIVERED"})
        tracking = user_client.get(f"/api/orders/track/{order['order_number']}").json()["data"]
        assert tracking["is_delivered"] is True

    def test_customers_cannot_manage_shipments(self, user_client):
        assert user_client.get("/api/shipments").status_code == 403
