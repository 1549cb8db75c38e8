"""API tests for operational endpoints."""

from fastapi.testclient import TestClient

from user_service.api.routers import operational


def test_root(client: TestClient, test_settings):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["app"] == test_settings.app_name


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready(client: TestClient):
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "checks": {"database": "ok"}}


def test_not_ready_when_database_is_down(client: TestClient, monkeypatch):
    """
    GIVEN a database that does not answer
    WHEN readiness is checked
    THEN the service reports 503
    """
    monkeypatch.setattr(operational, "ping", lambda db: False)

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["checks"]["database"] == "unavailable"
