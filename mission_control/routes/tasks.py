#  Mission Control - Task Routes
#
#  Task-level update and approval listing. Creation lives under
#  /missions/{id}/tasks because a task always belongs to a mission.
#
#  Depends on: container.py, models/schemas.py, services/workflow.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends

from mission_control.container import Container
from mission_control.models.schemas import ApprovalOut, TaskOut, TaskUpdate
from mission_control.services.workflow import WorkflowEngine

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.patch("/{task_id}")
@inject
async def update_task(
    task_id: str,
    body: TaskUpdate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> TaskOut:
    task = await workflow.update_task(task_id, body.to_patch(), actor=body.actor)
    return TaskOut(**task)


@router.get("/{task_id}/approvals")
@inject
async def list_task_approvals(
    task_id: str,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> list[ApprovalOut]:
    return [ApprovalOut(**a) for a in await workflow.list_approvals(task_id=task_id)]
