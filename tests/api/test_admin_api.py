"""API tests for admin account management."""

from fastapi.testclient import TestClient

BASE = "/admin/users"


class TestAdminAccess:
    """Role checks on /admin/users."""

    def test_customer_is_forbidden(self, client: TestClient, user_headers):
        response = client.get(BASE, headers=user_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_anonymous_is_unauthorized(self, client: TestClient):
        assert client.get(BASE).status_code == 401


class TestAdminUsersAPI:
    """Tests for admin reads, updates and deletes."""

    def test_list_users_paginates(self, client: TestClient, admin_headers, api_user):
        response = client.get(BASE, params={"limit": 1, "offset": 0}, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["limit"] == 1
        assert body["offset"] == 0

    def test_limit_out_of_range(self, client: TestClient, admin_headers):
        response = client.get(BASE, params={"limit": 500}, headers=admin_headers)

        assert response.status_code == 400

    def test_find_by_email(self, client: TestClient, admin_headers, api_user):
        response = client.get(f"{BASE}/by-email", params={"email": "API.USER@example.com"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["id"] == api_user["id"]

    def test_find_by_email_requires_email(self, client: TestClient, admin_headers):
        response = client.get(f"{BASE}/by-email", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "EMAIL_REQUIRED"

    def test_get_user_profile(self, client: TestClient, admin_headers, api_user):
        response = client.get(f"{BASE}/{api_user['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["paymentMethods"] == []

    def test_update_roles_and_tier(self, client: TestClient, admin_headers, api_user, event_sink):
        """
        GIVEN a customer account
        WHEN an admin grants a role and a tier
        THEN the account reflects both and the event records who changed it
        """
        response = client.patch(
            f"{BASE}/{api_user['id']}",
            json={"roles": ["customer", "vendor"], "tier": "gold"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["roles"] == ["customer", "vendor"]
        assert data["tier"] == "gold"
        topic, payload, _ = event_sink.events[-1]
        assert topic == "user.updated"
        assert payload["updatedBy"] == admin_headers["X-User-Id"]

    def test_update_unknown_user(self, client: TestClient, admin_headers):
        response = client.patch(f"{BASE}/missing", json={"tier": "gold"}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"

    def test_delete_user(self, client: TestClient, admin_headers, api_user):
        response = client.delete(f"{BASE}/{api_user['id']}", headers=admin_headers)

        assert response.status_code == 204
        assert client.get(f"{BASE}/{api_user['id']}", headers=admin_headers).status_code == 404


def new_user(**overrides):
    payload = {
        "email": "New.User@Example.com",
        "password": "secret123",
        "firstName": "New",
        "lastName": "User",
        "roles": ["support"],
        "tier": "platinum",
    }
    payload.update(overrides)
    return payload


class TestAdminCreateAPI:
    """Tests for POST /admin/users."""

    def test_create_with_roles_and_tier(self, client: TestClient, admin_headers, event_sink):
        response = client.post(BASE, json=new_user(), headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.user@example.com"
        assert data["roles"] == ["support"]
        assert data["tier"] == "platinum"
        assert "passwordHash" not in data
        assert event_sink.topics()[-1] == "user.created"

    def test_invalid_role_is_400(self, client: TestClient, admin_headers):
        response = client.post(BASE, json=new_user(roles=["wizard"]), headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_duplicate_email_is_409(self, client: TestClient, admin_headers, api_user):
        response = client.post(BASE, json=new_user(email=api_user["email"]), headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "EMAIL_EXISTS"

    def test_customer_cannot_create(self, client: TestClient, user_headers):
        response = client.post(BASE, json=new_user(), headers=user_headers)

        assert response.status_code == 403


class TestAdminDashboardAPI:
    """Tests for the stats and recent-user endpoints."""

    def test_stats(self, client: TestClient, admin_headers, api_user):
        """
        GIVEN an admin and a customer created this month
        WHEN stats are requested
        THEN both appear as new this month with camelCase keys
        """
        response = client.get(f"{BASE}/stats", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["active"] == 2
        assert body["newThisMonth"] == 2
        assert body["newLastMonth"] == 0
        assert body["growth"] == 100.0

    def test_recent_users(self, client: TestClient, admin_headers, api_user):
        response = client.get(f"{BASE}/list/recent", params={"limit": 1}, headers=admin_headers)

        assert response.status_code == 200
        [row] = response.json()
        assert row["id"] == api_user["id"]
        assert row["name"] == "Api User"
        assert row["role"] == "customer"
        assert "createdAt" in row

    def test_stats_requires_admin(self, client: TestClient, user_headers):
        assert client.get(f"{BASE}/stats", headers=user_headers).status_code == 403


class TestAdminPasswordResetAPI:
    def test_reset_password(self, client: TestClient, admin_headers, api_user):
        response = client.post(
            f"{BASE}/{api_user['id']}/password",
            json={"newPassword": "fresh789"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password reset successfully"

    def test_weak_password_is_400(self, client: TestClient, admin_headers, api_user):
        response = client.post(
            f"{BASE}/{api_user['id']}/password",
            json={"newPassword": "short"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PASSWORD"

    def test_unknown_user_is_404(self, client: TestClient, admin_headers):
        response = client.post(f"{BASE}/missing/password", json={"newPassword": "fresh789"}, headers=admin_headers)

        assert response.status_code == 404
