#  Mission Control - App Lifespan Tests
#
#  Tests for FastAPI app lifespan (startup/shutdown), the rate limit
#  handler and the error body shape.
#
#  Depends on: mission_control/app.py
#  Used by:    pytest

from unittest.mock import MagicMock, patch

import pytest
from dependency_injector import providers
from fastapi import Request
from slowapi.errors import RateLimitExceeded

from mission_control import app as app_module
from mission_control.app import rate_limit_handler
from mission_control.config import ConfigError
from mission_control.db.connection import Database


# ---------------------------------------------------------------------------
# Rate limit handler
# ---------------------------------------------------------------------------

class TestRateLimitHandler:
    async def test_returns_429(self):
        request = MagicMock(spec=Request)
        mock_limit = MagicMock()
        mock_limit.limit = "5 per minute"
        exc = RateLimitExceeded(mock_limit)

        response = await rate_limit_handler(request, exc)
        assert response.status_code == 429
        assert b"Rate limit exceeded" in response.body


# ---------------------------------------------------------------------------
# Lifespan startup/shutdown
# ---------------------------------------------------------------------------

class TestLifespan:
    async def test_refuses_to_start_without_token(self):
        with patch("mission_control.config.AUTH_TOKEN", ""):
            with pytest.raises(ConfigError):
                async with app_module.lifespan(app_module.app):
                    pass

    async def test_startup_migrates_and_shutdown_closes(self, tmp_path):
        db = Database()
        app_module.container.db.override(providers.Object(db))
        try:
            with patch("mission_control.config.AUTH_TOKEN", "a" * 32), \
                 patch.object(app_module, "DB_PATH", tmp_path / "mc.sqlite"):
                async with app_module.lifespan(app_module.app):
                    row = await db.fetchone("SELECT COUNT(*) AS cnt FROM event_logs")
                    assert row["cnt"] == 0
            assert db._conn is None
        finally:
            app_module.container.db.reset_override()


# ---------------------------------------------------------------------------
# Error bodies
# ---------------------------------------------------------------------------

class TestErrorShape:
    async def test_not_found_body(self, authed_client):
        resp = await authed_client.patch("/api/tasks/tsk_missing", json={"title": "x"})
        assert resp.status_code == 404
        assert set(resp.json()) == {"detail", "code"}

    async def test_request_id_unique_per_request(self, app_client):
        resp1 = await app_client.get("/health")
        resp2 = await app_client.get("/health")
        assert resp1.headers["x-request-id"] != resp2.headers["x-request-id"]
