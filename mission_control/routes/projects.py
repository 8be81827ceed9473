#  Mission Control - Project Routes
#
#  List, create and delete projects. Deleting cascades to missions and
#  their tasks; the event log keeps its history.
#
#  Depends on: container.py, models/schemas.py, services/workflow.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends, Query

from mission_control.container import Container
from mission_control.models.schemas import ProjectCreate, ProjectOut
from mission_control.services.workflow import WorkflowEngine

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
@inject
async def list_projects(
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> list[ProjectOut]:
    return [ProjectOut(**p) for p in await workflow.list_projects()]


@router.post("", status_code=201)
@inject
async def create_project(
    body: ProjectCreate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> ProjectOut:
    project = await workflow.create_project(body.name, actor=body.actor)
    return ProjectOut(**project)


@router.delete("/{project_id}", status_code=204)
@inject
async def delete_project(
    project_id: str,
    actor: str | None = Query(default=None),
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
):
    await workflow.delete_project(project_id, actor=actor)
