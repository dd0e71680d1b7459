from unittest.mock import AsyncMock

from bakery.core.config.settings import settings


def test_banner(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": f"{settings.PROJECT_NAME} API", "version": settings.VERSION}


def test_health_reports_environment_and_uptime(client):
    body = client.get("/api/health").json()

    assert body["status"] == "ok"
    assert body["environment"] == "test"
    assert body["version"] == settings.VERSION
    assert body["uptime_seconds"] >= 0


def test_readiness_reflects_database(client, mocker):
    probe = mocker.patch("bakery.adapters.api.health.check_database_health", new=AsyncMock(return_value=True))
    assert client.get("/api/health/ready").json() == {"status": "ok", "database": "healthy"}

    probe.return_value = False
    response = client.get("/api/health/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "degraded", "database": "unhealthy"}


def test_csrf_token_endpoint(client):
    response = client.get("/api/csrf-token")

    assert response.status_code == 200
    assert len(response.json()["csrfToken"]) == 64
