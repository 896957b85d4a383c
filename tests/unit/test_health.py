"""Unit tests for health endpoint

Verifies service info and the database-backed health status.
"""

import pytest
from fastapi.testclient import TestClient

from plumenote_service import __version__
from plumenote_service.config.settings import get_settings
from plumenote_service.main import app


@pytest.fixture
def sqlite_env(tmp_path, monkeypatch):
    """Point the service at a throwaway SQLite database."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'health.db'}")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.unit
class TestHealthCheck:
    """Test health check endpoint"""

    def test_root_reports_service(self):
        response = TestClient(app).get("/")

        assert response.json() == {
            "service": "plumenote-service",
            "version": __version__,
            "status": "running",
        }

    def test_degraded_without_database(self):
        """Without the lifespan no database client exists."""
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database_connected"] is False

    def test_healthy_once_started(self, sqlite_env):
        with TestClient(app) as client:
            body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["database_connected"] is True
        assert body["version"] == __version__
