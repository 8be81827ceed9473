#  Mission Control - Test Fixtures
#
#  Shared fixtures for the test suite.
#  Uses DI container overrides instead of monkey-patching singletons.
#
#  Depends on: mission_control/db/connection.py, mission_control/container.py, mission_control/app.py
#  Used by:    all test files

from unittest.mock import AsyncMock, patch

import pytest
from dependency_injector import providers

TEST_TOKEN = "test-token-0123456789"


# ---------------------------------------------------------------------------
# Database fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def tmp_db(tmp_path):
    """Create a fresh async database with schema applied."""
    from mission_control.db.connection import Database

    test_db = Database()
    db_path = tmp_path / "test.db"
    await test_db.init(str(db_path))

    yield test_db

    await test_db.close()


# ---------------------------------------------------------------------------
# Service fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def event_log(tmp_db):
    from mission_control.services.event_log import EventLog
    return EventLog(db=tmp_db)


@pytest.fixture
def broadcaster():
    from mission_control.services.broadcaster import EventBroadcaster
    return EventBroadcaster(queue_size=100, keepalive_seconds=0.1)


@pytest.fixture
def workflow(tmp_db, event_log, broadcaster):
    """WorkflowEngine wired to the test database and a private broadcaster."""
    from mission_control.services.workflow import WorkflowEngine
    return WorkflowEngine(
        db=tmp_db,
        event_log=event_log,
        broadcaster=broadcaster,
        system_actor="ALFRED",
        human_actor="FILIPE",
    )


@pytest.fixture
async def project(workflow):
    return await workflow.create_project("Apollo")


@pytest.fixture
async def mission(workflow, project):
    return await workflow.create_mission(project["id"], "Land on the moon")


# ---------------------------------------------------------------------------
# FastAPI client fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def auth_token():
    return TEST_TOKEN


@pytest.fixture
async def app_client(tmp_db, event_log, broadcaster, workflow):
    """FastAPI client with a fresh database. Uses DI container overrides.

    Uses explicit try/finally with reset_override() instead of context managers
    so DI state is always cleaned up between tests.
    """
    from httpx import ASGITransport, AsyncClient
    from mission_control.app import app, container
    from mission_control.services.auth import TokenAuthenticator

    init_patcher = patch.object(tmp_db, "init", new_callable=AsyncMock)

    container.db.override(providers.Object(tmp_db))
    container.auth.override(providers.Object(TokenAuthenticator(TEST_TOKEN)))
    container.event_log.override(providers.Object(event_log))
    container.broadcaster.override(providers.Object(broadcaster))
    container.workflow.override(providers.Object(workflow))
    init_patcher.start()

    # Reset rate limiter storage so tests don't hit limits from prior tests
    from mission_control.rate_limit import limiter as _limiter
    _limiter.reset()

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        init_patcher.stop()
        container.db.reset_override()
        container.auth.reset_override()
        container.event_log.reset_override()
        container.broadcaster.reset_override()
        container.workflow.reset_override()


@pytest.fixture
async def authed_client(app_client):
    """app_client with the shared bearer token set."""
    app_client.headers["Authorization"] = f"Bearer {TEST_TOKEN}"
    yield app_client
