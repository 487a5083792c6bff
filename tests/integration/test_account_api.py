"""Profile, notifications, reports, wishlist and compare over HTTP."""

ADDRESS = {
    "full_name": "Sam Shopper",
    "address_line_one": "1 Market Street",
    "city": "Springfield",
    "zip_code": "12345",
    "country": "US",
}


class TestProfile:
    def test_view_and_update(self, user_client, user):
        profile = user_client.get("/api/profile").json()["data"]
        assert profile["email"] == user.email
        assert "password_hash" not in profile

        updated = user_client.patch("/api/profile", json={"name": "Sam", "phone": "555-0100"})
        assert updated.json()["data"]["name"] == "Sam"
        assert updated.json()["data"]["phone"] == "555-0100"

    def test_first_address_becomes_default(self, user_client):
        first = user_client.post("/api/profile/addresses", json=ADDRESS)
        assert first.status_code == 201
        assert first.json()["data"]["is_default"] is True

        second = user_client.post(
            "/api/profile/addresses", json={**ADDRESS, "city": "Shelbyville", "is_default": True}
        ).json()["data"]

        addresses = user_client.get("/api/profile/addresses").json()["data"]
        assert [a["city"] for a in addresses] == ["Shelbyville", "Springfield"]
        assert [a["is_default"] for a in addresses] == [True, False]

        assert user_client.delete(f"/api/profile/addresses/{second['id']}").status_code == 200
        [remaining] = user_client.get("/api/profile/addresses").json()["data"]
        assert remaining["is_default"] is True

    def test_address_requires_fields(self, user_client):
        response = user_client.post("/api/profile/addresses", json={"city": "Springfield"})
        assert response.status_code == 422


class TestNotifications:
    def test_admin_sends_and_user_reads(self, user_client, admin_client, user, admin):
        created = admin_client.post(
            "/api/notifications",
            json={"user_id": user.id, "title": "Welcome", "message": "Thanks for joining"},
        )
        assert created.status_code == 201
        notification_id = created.json()["data"]["id"]

        inbox = user_client.get("/api/notifications").json()
        assert [n["id"] for n in inbox["data"]] == [notification_id]
        assert user_client.get("/api/notifications/stats").json()["data"]["unread"] == 1

        read = user_client.patch(f"/api/notifications/{notification_id}/read")
        assert read.json()["data"]["is_read"] is True
        assert user_client.get("/api/notifications/stats").json()["data"]["unread"] == 0

        assert user_client.delete(f"/api/notifications/{notification_id}").status_code == 200
        assert user_client.get(f"/api/notifications/{notification_id}").status_code == 404

    def test_bulk_and_read_all(self, user_client, admin_client, user, admin):
        bulk = admin_client.post(
            "/api/notifications/bulk",
            json={
                "user_ids": [user.id, user.id, admin.id],
                "title": "Sale",
                "message": "Everything is 20% off",
                "type": "PROMOTION",
            },
        )
        assert bulk.status_code == 201
        assert bulk.json()["data"]["count"] == 2

        marked = user_client.patch("/api/notifications/read-all")
        assert marked.json()["data"]["count"] == 1

        promotions = user_client.get("/api/notifications", params={"type": "PROMOTION"})
        assert promotions.json()["pagination"]["total"] == 1

    def test_admin_routes_are_protected(self, user_client, user):
        assert user_client.get("/api/notifications/admin").status_code == 403
        response = user_client.post(
            "/api/notifications",
            json={"user_id": user.id, "title": "Hi", "message": "Hello"},
        )
        assert response.status_code == 403


class TestReports:
    def test_submit_and_resolve(self, user_client, admin_client):
        created = user_client.post(
            "/api/reports",
            json={"type": "SHIPPING", "title": "Late parcel", "description": "Still waiting"},
        )
        assert created.status_code == 201
        report = created.json()["data"]
        assert report["status"] == "PENDING"

        resolved = admin_client.patch(
            f"/api/reports/{report['id']}",
            json={"status": "RESOLVED", "resolution": "Parcel found"},
        ).json()["data"]
        assert resolved["status"] == "RESOLVED"
        assert resolved["resolved_at"] is not None

        mine = user_client.get("/api/reports").json()
        assert mine["pagination"]["total"] == 1

        stats = admin_client.get("/api/reports/stats").json()["data"]
        assert stats["by_type"] == {"SHIPPING": 1}

    def test_customers_cannot_update(self, user_client):
        report = user_client.post(
            "/api/reports",
            json={"type": "SHIPPING", "title": "Late parcel", "description": "Still waiting"},
        ).json()["data"]

        response = user_client.patch(f"/api/reports/{report['id']}", json={"status": "REJECTED"})
        assert response.status_code == 403

    def test_generate_analytics(self, admin_client, product):
        created = admin_client.post(
            "/api/reports/analytics",
            json={"name": "Stock check", "report_type": "INVENTORY"},
        )
        assert created.status_code == 201
        report = created.json()["data"]
        assert report["status"] == "COMPLETED"
        assert report["data"]["total_products"] == 1

        listing = admin_client.get("/api/reports/analytics", params={"report_type": "INVENTORY"})
        assert [r["id"] for r in listing.json()["data"]] == [report["id"]]

    def test_invalid_analytics_filters(self, admin_client):
        response = admin_client.post(
            "/api/reports/analytics",
            json={"name": "Bad", "report_type": "SALES", "filters": {"start_date": "soon"}},
        )
        assert response.status_code == 400


class TestWishlist:
    def test_add_check_remove(self, user_client, product):
        product_id = product.product.id
        added = user_client.post("/api/wishlist", json={"product_id": product_id})
        assert added.status_code == 201
        assert added.json()["data"]["product"]["id"] == product_id

        assert user_client.get(f"/api/wishlist/check/{product_id}").json()["data"]["in_list"]
        duplicate = user_client.post("/api/wishlist", json={"product_id": product_id})
        assert duplicate.status_code == 409

        assert user_client.delete(f"/api/wishlist/{product_id}").status_code == 200
        assert user_client.get("/api/wishlist").json()["data"] == []


class TestCompare:
    def test_matrix(self, user_client, make_product):
        cheap = make_product(name="Cheap", price=10.0)
        dear = make_product(name="Dear", price=90.0)
        for detail in (cheap, dear):
            user_client.post("/api/compare", json={"product_id": detail.product.id})

        matrix = user_client.get("/api/compare/matrix").json()["data"]
        assert sorted(matrix["matrix"]["price"]) == [10.0, 90.0]

    def test_capacity(self, user_client, make_product):
        for index in range(3):
            detail = make_product(name=f"Shoe {index}")
            response = user_client.post("/api/compare", json={"product_id": detail.product.id})
            assert response.status_code == 201

        extra = make_product(name="One too many")
        response = user_client.post("/api/compare", json={"product_id": extra.product.id})

        assert response.status_code == 400
        assert response.json()["message"] == "You can compare at most 3 products at a time"
