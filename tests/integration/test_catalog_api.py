"""Categories, products, flash sales and reviews over HTTP."""

from datetime import timedelta

from src.app.entities.core._base import utc_now

PRODUCT = {
    "name": "Canvas Sneaker",
    "price": 60.0,
    "brand": "Acme",
    "sizes": ["40", "41"],
    "colors": ["white"],
    "variants": [
        {"color": "white", "size": "40", "quantity": 3},
        {"color": "white", "size": "41", "quantity": 2},
    ],
    "inventory_quantity": 5,
}


class TestCategories:
    def test_admin_crud(self, admin_client, client):
        created = admin_client.post("/api/categories", json={"name": "Bags"})
        assert created.status_code == 201
        category_id = created.json()["data"]["id"]
        assert created.json()["data"]["slug"] == "bags"

        assert [c["name"] for c in client.get("/api/categories").json()["data"]] == ["Bags"]

        renamed = admin_client.put(f"/api/categories/{category_id}", json={"name": "Backpacks"})
        assert renamed.json()["data"]["name"] == "Backpacks"

        assert admin_client.delete(f"/api/categories/{category_id}").status_code == 200
        assert client.get(f"/api/categories/{category_id}").status_code == 404

    def test_duplicate_name(self, admin_client, category):
        response = admin_client.post("/api/categories", json={"name": category.name})
        assert response.status_code == 409

    def test_category_with_products_cannot_be_deleted(self, admin_client, category, product):
        response = admin_client.delete(f"/api/categories/{category.id}")
        assert response.status_code == 409

    def test_customers_cannot_create(self, user_client):
        assert user_client.post("/api/categories", json={"name": "Hats"}).status_code == 403


class TestProducts:
    def test_create_and_fetch(self, admin_client, client, category):
        response = admin_client.post("/api/products", json={**PRODUCT, "category_id": category.id})

        assert response.status_code == 201
        detail = response.json()["data"]
        assert detail["product"]["slug"] == "canvas-sneaker"
        assert len(detail["variants"]) == 2
        assert detail["inventory"]["quantity"] == 5

        fetched = client.get(f"/api/products/{detail['product']['id']}")
        assert fetched.json()["data"]["product"]["name"] == "Canvas Sneaker"

    def test_listing_filters_and_pagination(self, client, make_product):
        make_product(name="Cheap", price=10.0)
        make_product(name="Mid", price=50.0)
        make_product(name="Dear", price=150.0)

        response = client.get(
            "/api/products", params={"min_price": 20, "sort_by": "price", "limit": 1}
        )

        body = response.json()
        assert [p["name"] for p in body["data"]] == ["Dear"]
        assert body["pagination"]["total"] == 2
        assert body["pagination"]["pages"] == 2

    def test_search(self, client, make_product):
        make_product(name="Trail Runner")
        make_product(name="City Loafer")

        response = client.get("/api/products/search", params={"q": "loafer"})
        assert [p["name"] for p in response.json()["data"]] == ["City Loafer"]

    def test_update_and_delete(self, admin_client, client, product):
        product_id = product.product.id
        updated = admin_client.put(f"/api/products/{product_id}", json={"price": 45.0})
        assert updated.json()["data"]["price"] == 45.0

        assert admin_client.delete(f"/api/products/{product_id}").status_code == 200
        assert client.get(f"/api/products/{product_id}").status_code == 404

    def test_inventory_endpoints(self, admin_client, product):
        product_id = product.product.id
        response = admin_client.put(f"/api/products/{product_id}/inventory", json={"quantity": 42})
        assert response.status_code == 200
        assert admin_client.get(f"/api/products/{product_id}/inventory").json()["data"][
            "quantity"
        ] == 42


class TestFlashSales:
    def test_schedule_and_remove(self, admin_client, client, product):
        start = utc_now() + timedelta(hours=1)
        created = admin_client.post(
            "/api/flash-sales",
            json={
                "product_id": product.product.id,
                "discount": 50,
                "start_date": start.isoformat(),
                "end_date": (start + timedelta(days=1)).isoformat(),
            },
        )
        assert created.status_code == 201
        sale_id = created.json()["data"]["id"]
        assert created.json()["data"]["price"] == 20.0

        product_page = client.get(f"/api/products/{product.product.id}").json()["data"]
        assert product_page["product"]["price"] == 20.0
        assert product_page["flash_sale"]["id"] == sale_id

        assert admin_client.delete(f"/api/flash-sales/{sale_id}").status_code == 200
        product_page = client.get(f"/api/products/{product.product.id}").json()["data"]
        assert product_page["product"]["price"] == 40.0

    def test_invalid_window(self, admin_client, product):
        start = utc_now() + timedelta(days=2)
        response = admin_client.post(
            "/api/flash-sales",
            json={
                "product_id": product.product.id,
                "discount": 10,
                "start_date": start.isoformat(),
                "end_date": (start - timedelta(days=1)).isoformat(),
            },
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Start date must be before end date"


class TestReviews:
    def test_review_and_reply(self, user_client, admin_client, client, product):
        product_id = product.product.id
        created = user_client.post(
            f"/api/products/{product_id}/reviews", json={"rate": 4, "message": "Comfy"}
        )
        assert created.status_code == 201
        review_id = created.json()["data"]["id"]

        reply = admin_client.put(
            f"/api/products/reviews/{review_id}/reply", json={"message": "Thanks!"}
        )
        assert reply.status_code == 200

        page = client.get(f"/api/products/{product_id}/reviews").json()
        assert page["data"]["total"] == 1
        assert page["data"]["avg_rating"] == 4.0
        assert page["data"]["reviews"][0]["reply"]["message"] == "Thanks!"

    def test_rating_bounds(self, user_client, product):
        response = user_client.post(
            f"/api/products/{product.product.id}/reviews", json={"rate": 6}
        )
        assert response.status_code == 422
