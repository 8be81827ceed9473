#  Mission Control - Event Routes
#
#  Recent-events query and the live SSE feed.
#  The bearer check (including ?token= on the feed) lives in middleware/auth.py.
#
#  Depends on: container.py, services/event_log.py, services/broadcaster.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from mission_control.config import EVENTS_DEFAULT_LIMIT
from mission_control.container import Container
from mission_control.models.schemas import EventOut
from mission_control.services.broadcaster import EventBroadcaster
from mission_control.services.event_log import EventLog

router = APIRouter(prefix="/events", tags=["events"])


@router.get("")
@inject
async def list_events(
    limit: int = Query(default=EVENTS_DEFAULT_LIMIT, ge=1),
    projectId: str | None = None,
    missionId: str | None = None,
    taskId: str | None = None,
    event_log: EventLog = Depends(Provide[Container.event_log]),
) -> list[EventOut]:
    """Newest first. Limits above the configured maximum are capped, not rejected."""
    rows = await event_log.query(limit, project_id=projectId, mission_id=missionId, task_id=taskId)
    return [EventOut(**r) for r in rows]


@router.get("/stream")
@inject
async def stream_events(
    broadcaster: EventBroadcaster = Depends(Provide[Container.broadcaster]),
):
    """SSE stream of every event committed after the client connects."""
    return StreamingResponse(
        broadcaster.stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
