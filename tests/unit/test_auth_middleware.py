#  Mission Control - Auth Middleware Tests
#
#  Tests for the bearer-token ASGI guard and TokenAuthenticator.
#
#  Depends on: mission_control/middleware/auth.py, mission_control/services/auth.py
#  Used by:    pytest

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from mission_control.middleware.auth import BearerAuthMiddleware
from mission_control.services.auth import TokenAuthenticator


class _Body(BaseModel):
    name: str


def _guarded_app(token: str = "s3cret") -> FastAPI:
    app = FastAPI()
    app.add_middleware(BearerAuthMiddleware, get_auth=lambda: TokenAuthenticator(token))

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.post("/api/things")
    async def create_thing(body: _Body):
        return {"name": body.name}

    @app.get("/api/events")
    async def events():
        return []

    @app.get("/api/events/stream")
    async def stream():
        return {"stream": True}

    return app


@pytest.fixture
async def guarded_client():
    transport = ASGITransport(app=_guarded_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestTokenAuthenticator:
    def test_matching_token(self):
        assert TokenAuthenticator("s3cret").verify("s3cret") is True

    def test_wrong_or_missing(self):
        auth = TokenAuthenticator("s3cret")
        assert auth.verify("nope") is False
        assert auth.verify("") is False
        assert auth.verify(None) is False

    def test_unconfigured_never_verifies(self):
        auth = TokenAuthenticator("")
        assert auth.configured is False
        assert auth.verify("") is False
        assert auth.verify("anything") is False


class TestBearerAuthMiddleware:
    async def test_valid_header(self, guarded_client):
        resp = await guarded_client.post(
            "/api/things", json={"name": "x"}, headers={"Authorization": "Bearer s3cret"},
        )
        assert resp.status_code == 200

    async def test_missing_header(self, guarded_client):
        resp = await guarded_client.post("/api/things", json={"name": "x"})
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Not authenticated", "code": "unauthorized"}
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    async def test_wrong_token(self, guarded_client):
        resp = await guarded_client.get("/api/events", headers={"Authorization": "Bearer wrong"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid token"

    async def test_malformed_body_without_token_is_401(self, guarded_client):
        resp = await guarded_client.post(
            "/api/things", content=b"{bad", headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 401

    async def test_public_paths_pass(self, guarded_client):
        assert (await guarded_client.get("/health")).status_code == 200

    async def test_preflight_passes(self, guarded_client):
        resp = await guarded_client.options("/api/things")
        assert resp.status_code != 401


class TestStreamQueryToken:
    async def test_query_param_accepted_on_stream(self, guarded_client):
        assert (await guarded_client.get("/api/events/stream?token=s3cret")).status_code == 200

    async def test_query_param_ignored_elsewhere(self, guarded_client):
        assert (await guarded_client.get("/api/events?token=s3cret")).status_code == 401

    async def test_header_wins_over_query(self, guarded_client):
        resp = await guarded_client.get(
            "/api/events/stream?token=s3cret", headers={"Authorization": "Bearer wrong"},
        )
        assert resp.status_code == 401

    async def test_nothing_presented(self, guarded_client):
        assert (await guarded_client.get("/api/events/stream")).status_code == 401
