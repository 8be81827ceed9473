#  Mission Control - Auth API Integration Tests
#
#  Bearer credential in front of every path except /health.
#
#  Depends on: mission_control/middleware/auth.py, mission_control/app.py, tests/conftest.py
#  Used by:    pytest

class TestHealth:
    async def test_health_needs_no_token(self, app_client):
        resp = await app_client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}

    async def test_request_id_header(self, app_client):
        resp = await app_client.get("/health")
        assert len(resp.headers["X-Request-ID"]) == 12


class TestProtectedRoutes:
    async def test_missing_token_returns_401(self, app_client):
        resp = await app_client.get("/api/projects")
        assert resp.status_code == 401
        assert resp.json()["code"] == "unauthorized"
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    async def test_wrong_token_returns_401(self, app_client):
        resp = await app_client.get("/api/projects", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401

    async def test_401_before_handler_runs(self, app_client, tmp_db):
        resp = await app_client.post("/api/projects", json={"name": "Sneaky"})
        assert resp.status_code == 401
        row = await tmp_db.fetchone("SELECT COUNT(*) AS cnt FROM projects")
        assert row["cnt"] == 0

    async def test_malformed_body_without_token_returns_401(self, app_client):
        resp = await app_client.post(
            "/api/projects", content=b"{bad", headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == "unauthorized"

    async def test_malformed_body_with_token_returns_400(self, authed_client):
        resp = await authed_client.post(
            "/api/projects", content=b"{bad", headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400

    async def test_valid_token(self, authed_client):
        resp = await authed_client.get("/api/projects")
        assert resp.status_code == 200

    async def test_events_require_token(self, app_client):
        assert (await app_client.get("/api/events")).status_code == 401

    async def test_events_list_ignores_query_token(self, app_client, auth_token):
        resp = await app_client.get(f"/api/events?token={auth_token}")
        assert resp.status_code == 401

    async def test_stream_rejects_bad_query_token(self, app_client):
        resp = await app_client.get("/api/events/stream?token=nope")
        assert resp.status_code == 401

    async def test_stream_rejects_missing_token(self, app_client):
        resp = await app_client.get("/api/events/stream")
        assert resp.status_code == 401
