#  Mission Control - Agent Routes
#
#  Registry of the agents working the board and what they are on.
#
#  Depends on: container.py, models/schemas.py, services/workflow.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends

from mission_control.container import Container
from mission_control.models.schemas import AgentCreate, AgentOut, AgentUpdate
from mission_control.services.workflow import WorkflowEngine

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("")
@inject
async def list_agents(
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> list[AgentOut]:
    return [AgentOut(**a) for a in await workflow.list_agents()]


@router.post("", status_code=201)
@inject
async def create_agent(
    body: AgentCreate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> AgentOut:
    agent = await workflow.create_agent(body.name, role=body.role, state=body.state, actor=body.actor)
    return AgentOut(**agent)


@router.patch("/{agent_id}")
@inject
async def update_agent(
    agent_id: str,
    body: AgentUpdate,
    workflow: WorkflowEngine = Depends(Provide[Container.workflow]),
) -> AgentOut:
    agent = await workflow.update_agent(agent_id, body.to_patch(), actor=body.actor)
    return AgentOut(**agent)
