#  Mission Control - Mission Routes
#
#  Missions plus everything scoped under one: tasks, approvals,
#  artifacts, links and the OK EXECUTAR action.
#
#  Depends on: container.py, models/schemas.py, services/workflow.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Body, Depends

from mission_control.container import Container
from mission_control.models.schemas import (
    ApprovalDecision,
    ApprovalOut,
    ArtifactCreate,
    ArtifactOut,
    LinkCreate,
    LinkOut,
    MissionCreate,
    MissionOut,
    MissionUpdate,
    OkExecuteOut,
    TaskCreate,
    TaskOut,
)
from mission_control.services.workflow import WorkflowEngine

router = APIRouter(prefix="/missions", tags=["missions"])


# ---------------------------------------------------------------------------
# Missions
# ---------------------------------------------------------------------------

@router.get("")
@inject
async def list_missions(
    projectId: str | None = None,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> list[MissionOut]:
    return [MissionOut(**m) for m in await workflow.list_missions(projectId)]


@router.post("", status_code=201)
@inject
async def create_mission(
    body: MissionCreate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> MissionOut:
    mission = await workflow.create_mission(
        body.projectId,
        body.title,
        objective=body.objective,
        status=body.status,
        risk=body.risk,
        cost_usd=body.costUsd,
        actor=body.actor,
    )
    return MissionOut(**mission)


@router.patch("/{mission_id}")
@inject
async def update_mission(
    mission_id: str,
    body: MissionUpdate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> MissionOut:
    mission = await workflow.update_mission(mission_id, body.to_patch(), actor=body.actor)
    return MissionOut(**mission)


@router.post("/{mission_id}/ok-execute")
@inject
async def ok_execute(
    mission_id: str,
    body: ApprovalDecision | None = Body(default=None),
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> OkExecuteOut:
    """OK EXECUTAR: approve the newest pending approval, or record a noop."""
    outcome = await workflow.ok_execute(mission_id, actor=body.actor if body else None)
    return OkExecuteOut(
        result=outcome.result.value,
        approval=ApprovalOut(**outcome.approval) if outcome.approval else None,
    )


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

@router.get("/{mission_id}/tasks")
@inject
async def list_tasks(
    mission_id: str,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> list[TaskOut]:
    return [TaskOut(**t) for t in await workflow.list_tasks(mission_id)]


@router.post("/{mission_id}/tasks", status_code=201)
@inject
async def create_task(
    mission_id: str,
    body: TaskCreate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> TaskOut:
    task = await workflow.create_task(
        mission_id,
        body.title,
        description=body.description,
        status=body.status,
        critical=body.critical,
        actor=body.actor,
    )
    return TaskOut(**task)


# ---------------------------------------------------------------------------
# Approvals / Artifacts / Links
# ---------------------------------------------------------------------------

@router.get("/{mission_id}/approvals")
@inject
async def list_mission_approvals(
    mission_id: str,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> list[ApprovalOut]:
    return [ApprovalOut(**a) for a in await workflow.list_approvals(mission_id=mission_id)]


@router.get("/{mission_id}/artifacts")
@inject
async def list_artifacts(
    mission_id: str,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> list[ArtifactOut]:
    return [ArtifactOut(**a) for a in await workflow.list_artifacts(mission_id)]


@router.post("/{mission_id}/artifacts", status_code=201)
@inject
async def create_artifact(
    mission_id: str,
    body: ArtifactCreate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> ArtifactOut:
    artifact = await workflow.create_artifact(
        mission_id, body.title, body.ref, kind=body.kind, task_id=body.taskId, actor=body.actor,
    )
    return ArtifactOut(**artifact)


@router.get("/{mission_id}/links")
@inject
async def list_links(
    mission_id: str,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> list[LinkOut]:
    return [LinkOut(**link) for link in await workflow.list_links(mission_id)]


@router.post("/{mission_id}/links", status_code=201)
@inject
async def create_link(
    mission_id: str,
    body: LinkCreate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> LinkOut:
    link = await workflow.create_link(
        mission_id, body.title, body.url, task_id=body.taskId, actor=body.actor,
    )
    return LinkOut(**link)
