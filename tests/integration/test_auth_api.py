"""Registration, cookie login and admin user management over HTTP."""

from src.app.runtime.context import get_config
from tests.fixtures.commerce import PASSWORD


def _cookie_names():
    security = get_config().security
    return security.access_cookie_name, security.refresh_cookie_name


class TestAuthFlow:
    def test_register(self, client):
        response = client.post(
            "/api/auth/register",
            json={"email": "Fresh@Example.com", "password": "secret123", "name": "Fresh"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["email"] == "fresh@example.com"
        assert body["data"]["role"] == "USER"
        assert "password_hash" not in body["data"]

    def test_register_duplicate(self, client, user):
        response = client.post(
            "/api/auth/register", json={"email": user.email, "password": "secret123"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User already exists"

    def test_login_sets_cookies_and_me_works(self, client, user):
        access_name, refresh_name = _cookie_names()

        response = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})

        assert response.status_code == 200
        assert access_name in response.cookies
        assert refresh_name in response.cookies
        set_cookie = response.headers.get_list("set-cookie")
        assert all("httponly" in header.lower() for header in set_cookie)

        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["data"]["id"] == user.id

    def test_login_wrong_password(self, client, user):
        response = client.post("/api/auth/login", json={"email": user.email, "password": "nope"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid email or password"

    def test_bearer_header_is_accepted(self, client, user, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers(user))
        assert response.status_code == 200

    def test_refresh_and_logout(self, client, user):
        client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})

        refreshed = client.post("/api/auth/refresh")
        assert refreshed.status_code == 200

        logout = client.post("/api/auth/logout")
        assert logout.status_code == 200

        assert client.post("/api/auth/refresh").status_code == 401

    def test_change_password(self, user_client, client, user):
        response = user_client.post(
            "/api/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "brand-new-pass"},
        )
        assert response.status_code == 200

        login = client.post(
            "/api/auth/login", json={"email": user.email, "password": "brand-new-pass"}
        )
        assert login.status_code == 200


class TestUserAdministration:
    def test_list_users(self, admin_client, user, admin):
        response = admin_client.get("/api/users", params={"page": 1, "limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 1
        assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}

    def test_change_role(self, admin_client, user):
        response = admin_client.patch(f"/api/users/{user.id}/role", json={"role": "ADMIN"})
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "ADMIN"

    def test_delete_user(self, admin_client, user):
        assert admin_client.delete(f"/api/users/{user.id}").status_code == 200
        assert admin_client.get(f"/api/users/{user.id}").status_code == 404

    def test_forbidden_request_keeps_caller_signed_in(self, user_client, user):
        assert user_client.get("/api/users").status_code == 403
        assert user_client.get("/api/users").status_code == 403
        me = user_client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["data"]["email"] == user.email
