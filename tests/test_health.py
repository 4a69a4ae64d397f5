"""
Tests for health check endpoints.
"""

from fastapi.testclient import TestClient

from app.core.config import settings


def test_health_reports_identity(client: TestClient, api: str) -> None:
    data = client.get(f"{api}/health").json()
    assert data == {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "active_forms": 0,
    }


def test_health_counts_active_forms(client: TestClient, api: str) -> None:
    client.post(f"{api}/forms")
    client.post(f"{api}/forms")
    assert client.get(f"{api}/health").json()["active_forms"] == 2


def test_database_health_counts_saved_quotes(client: TestClient, api: str) -> None:
    client.post(f"{api}/quotes", json={})
    response = client.get(f"{api}/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok", "saved_quotes": 1}
