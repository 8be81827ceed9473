#  Mission Control - Seed Route
#
#  Creates a demo board. Rate limited: every call adds a new project.
#
#  Depends on: container.py, rate_limit.py, services/workflow.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Body, Depends, Request

from mission_control.container import Container
from mission_control.models.schemas import SeedOut, SeedRequest
from mission_control.rate_limit import SEED_RATE_LIMIT, limiter
from mission_control.services.workflow import WorkflowEngine

router = APIRouter(prefix="/seed", tags=["seed"])


@router.post("/demo", status_code=201)
@limiter.limit(SEED_RATE_LIMIT)
@inject
async def seed_demo(
    request: Request,
    body: SeedRequest | None = Body(default=None),
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> SeedOut:
    result = await workflow.seed_demo(actor=body.actor if body else None)
    return SeedOut(**result)
