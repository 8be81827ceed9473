#  Mission Control - FastAPI Application
#
#  Main app setup: lifespan, exception mapping, CORS, router includes.
#  Creates the DI container and manages service lifecycle.
#
#  Depends on: config.py, container.py, routes/*.py, middleware/auth.py
#  Used by:    run.py

import logging
import uuid
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from mission_control.config import CORS_ORIGINS, DB_PATH, validate_config
from mission_control.container import Container
from mission_control.exceptions import (
    ConflictError,
    MissionControlError,
    NotFoundError,
    StorageError,
    UnknownReferenceError,
    ValidationError,
)
from mission_control.logging_config import set_request_id
from mission_control.middleware.auth import BearerAuthMiddleware
from mission_control.rate_limit import limiter
from mission_control.routes.agents import router as agents_router
from mission_control.routes.approvals import router as approvals_router
from mission_control.routes.events import router as events_router
from mission_control.routes.health import router as health_router
from mission_control.routes.missions import router as missions_router
from mission_control.routes.projects import router as projects_router
from mission_control.routes.seed import router as seed_router
from mission_control.routes.tasks import router as tasks_router

logger = logging.getLogger("mission_control.app")

# Create and wire the DI container
container = Container()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle.

    Uses AsyncExitStack so that if any startup step fails, all previously
    initialized resources are cleaned up in reverse order.
    """
    logger.info("Mission Control starting...")

    # Refuse to start without a credential or with broken limits
    validate_config()

    db = container.db()

    async with AsyncExitStack() as stack:
        await db.init(DB_PATH, run_migrations=True)
        stack.push_async_callback(db.close)

        yield

    logger.info("Mission Control shutting down")


app = FastAPI(
    title="Mission Control",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.limiter = limiter


def _error(status_code: int, exc: MissionControlError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": exc.code},
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Try again later.", "code": "rate_limited"},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    detail = f"{where}: {first.get('msg', 'invalid request')}" if where else first.get("msg", "invalid request")
    return JSONResponse(
        status_code=400,
        content={"detail": detail, "code": ValidationError.code, "errors": errors},
    )


# Business errors. Starlette picks the most specific class in the MRO.
@app.exception_handler(UnknownReferenceError)
async def unknown_reference_handler(request: Request, exc: UnknownReferenceError):
    return _error(400, exc)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, exc)


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return _error(400, exc)


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return _error(409, exc)


@app.exception_handler(StorageError)
async def storage_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return _error(500, exc)


@app.exception_handler(MissionControlError)
async def mission_control_handler(request: Request, exc: MissionControlError):
    return _error(400, exc)


@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "internal_error"},
    )


# Bearer check runs before routing, so it beats body parsing
app.add_middleware(BearerAuthMiddleware, get_auth=container.auth)

# Request ID tracing
class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = uuid.uuid4().hex[:12]
        set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            set_request_id(None)

app.add_middleware(RequestIDMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# Health check (public, unauthenticated, for liveness probes)
app.include_router(health_router)

# API routes (BearerAuthMiddleware guards everything under /api)
app.include_router(projects_router, prefix="/api")
app.include_router(missions_router, prefix="/api")
app.include_router(tasks_router, prefix="/api")
app.include_router(approvals_router, prefix="/api")
app.include_router(agents_router, prefix="/api")
app.include_router(seed_router, prefix="/api")
app.include_router(events_router, prefix="/api")

