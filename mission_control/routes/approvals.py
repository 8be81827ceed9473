#  Mission Control - Approval Routes
#
#  Request, approve and reject. Approved and rejected are terminal:
#  deciding an already-decided approval returns 409.
#
#  Depends on: container.py, models/schemas.py, services/workflow.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Body, Depends

from mission_control.container import Container
from mission_control.models.schemas import ApprovalCreate, ApprovalDecision, ApprovalOut
from mission_control.services.workflow import WorkflowEngine

router = APIRouter(prefix="/approvals", tags=["approvals"])


@router.post("", status_code=201)
@inject
async def request_approval(
    body: ApprovalCreate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> ApprovalOut:
    approval = await workflow.request_approval(
        title=body.title,
        mission_id=body.missionId,
        task_id=body.taskId,
        requested_by=body.requestedBy,
        actor=body.actor,
    )
    return ApprovalOut(**approval)


@router.post("/{approval_id}/approve")
@inject
async def approve(
    approval_id: str,
    body: ApprovalDecision | None = Body(default=None),
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> ApprovalOut:
    approval = await workflow.approve_approval(approval_id, actor=body.actor if body else None)
    return ApprovalOut(**approval)


@router.post("/{approval_id}/reject")
@inject
async def reject(
    approval_id: str,
    body: ApprovalDecision | None = Body(default=None),
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> ApprovalOut:
    approval = await workflow.reject_approval(approval_id, actor=body.actor if body else None)
    return ApprovalOut(**approval)
