#  Mission Control - Auth Middleware
#
#  ASGI guard for the shared bearer credential. Runs before routing, so a
#  request without the token is rejected before its body is parsed.
#  /health and CORS preflights are public. The SSE feed also takes ?token=
#  because EventSource clients cannot set headers.
#
#  Depends on: services/auth.py, exceptions.py
#  Used by:    app.py

from typing import Callable

from fastapi.responses import JSONResponse
from fastapi.security.utils import get_authorization_scheme_param
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Receive, Scope, Send

from mission_control.exceptions import UnauthorizedError
from mission_control.services.auth import TokenAuthenticator

PROTECTED_PREFIX = "/api"
QUERY_TOKEN_PATHS = frozenset({"/api/events/stream"})


def presented_token(conn: HTTPConnection) -> str | None:
    """Bearer credential from the Authorization header, else ?token= on the SSE feed."""
    scheme, credentials = get_authorization_scheme_param(conn.headers.get("Authorization"))
    if scheme.lower() == "bearer" and credentials:
        return credentials
    if conn.url.path in QUERY_TOKEN_PATHS:
        return conn.query_params.get("token") or None
    return None


def _is_protected(path: str) -> bool:
    return path == PROTECTED_PREFIX or path.startswith(PROTECTED_PREFIX + "/")


class BearerAuthMiddleware:
    """Reject unauthenticated /api requests with 401.

    get_auth is called per request so container overrides take effect.
    """

    def __init__(self, app: ASGIApp, get_auth: Callable[[], TokenAuthenticator]):
        self.app = app
        self.get_auth = get_auth

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or scope["method"] == "OPTIONS" or not _is_protected(scope["path"]):
            await self.app(scope, receive, send)
            return

        conn = HTTPConnection(scope)
        token = presented_token(conn)
        if not token:
            error = UnauthorizedError("Not authenticated")
        elif not self.get_auth().verify(token):
            error = UnauthorizedError("Invalid token")
        else:
            await self.app(scope, receive, send)
            return

        response = JSONResponse(
            status_code=401,
            content={"detail": str(error), "code": error.code},
            headers={"WWW-Authenticate": "Bearer"},
        )
        await response(scope, receive, send)
