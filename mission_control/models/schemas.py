#  Mission Control - Pydantic Schemas
#
#  Request/response models for the REST API. Field names match the
#  camelCase column names of the persisted schema.
#  Status/risk/state vocabularies are checked by services/transitions.py,
#  not here, so every caller of the workflow engine gets the same errors.
#
#  Depends on: models/patches.py
#  Used by:    routes/*

from pydantic import BaseModel, Field

from mission_control.models.patches import AgentPatch, MissionPatch, TaskPatch


def _patch_fields(body: BaseModel, exclude: set[str]) -> dict:
    """Fields the client actually sent, minus non-column fields like actor."""
    return {
        name: getattr(body, name)
        for name in body.model_fields_set
        if name not in exclude
    }


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class ProjectCreate(BaseModel):
    name: str = Field(..., max_length=120)
    actor: str | None = None


class ProjectOut(BaseModel):
    id: str
    name: str
    createdAt: str
    updatedAt: str


# ---------------------------------------------------------------------------
# Missions
# ---------------------------------------------------------------------------

class MissionCreate(BaseModel):
    projectId: str = Field(..., min_length=1)
    title: str = Field(..., max_length=200)
    objective: str = ""
    status: str = "Backlog"
    risk: str = "low"
    costUsd: float | None = None
    actor: str | None = None


class MissionUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    objective: str | None = None
    status: str | None = None
    risk: str | None = None
    costUsd: float | None = None
    actor: str | None = None

    def to_patch(self) -> MissionPatch:
        return MissionPatch(**_patch_fields(self, {"actor"}))


class MissionOut(BaseModel):
    id: str
    projectId: str
    title: str
    objective: str = ""
    status: str
    risk: str
    costUsd: float | None = None
    createdAt: str
    updatedAt: str


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

class TaskCreate(BaseModel):
    title: str = Field(..., max_length=200)
    description: str = ""
    status: str = "Backlog"
    critical: bool = False
    actor: str | None = None


class TaskUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    status: str | None = None
    critical: bool | None = None
    actor: str | None = None

    def to_patch(self) -> TaskPatch:
        return TaskPatch(**_patch_fields(self, {"actor"}))


class TaskOut(BaseModel):
    id: str
    missionId: str
    title: str
    description: str = ""
    status: str
    critical: bool = False
    createdAt: str
    updatedAt: str


# ---------------------------------------------------------------------------
# Approvals
# ---------------------------------------------------------------------------

class ApprovalCreate(BaseModel):
    missionId: str | None = None
    taskId: str | None = None
    title: str = Field(..., max_length=200)
    requestedBy: str | None = None
    actor: str | None = None


class ApprovalDecision(BaseModel):
    """Body for approve, reject and OK EXECUTAR."""
    actor: str | None = None


class ApprovalOut(BaseModel):
    id: str
    missionId: str | None = None
    taskId: str | None = None
    title: str
    state: str
    requestedBy: str
    requestedAt: str
    approvedAt: str | None = None
    createdAt: str
    updatedAt: str


class OkExecuteOut(BaseModel):
    """Outcome of OK EXECUTAR: result "noop" carries no approval."""
    result: str
    approval: ApprovalOut | None = None


# ---------------------------------------------------------------------------
# Artifacts / Links
# ---------------------------------------------------------------------------

class ArtifactCreate(BaseModel):
    title: str = Field(..., max_length=200)
    kind: str = Field(default="file", max_length=50)
    ref: str = Field(..., max_length=2000)
    taskId: str | None = None
    actor: str | None = None


class ArtifactOut(BaseModel):
    id: str
    missionId: str | None = None
    taskId: str | None = None
    title: str
    kind: str
    ref: str
    createdAt: str
    updatedAt: str


class LinkCreate(BaseModel):
    title: str = Field(..., max_length=200)
    url: str = Field(..., max_length=2000)
    taskId: str | None = None
    actor: str | None = None


class LinkOut(BaseModel):
    id: str
    missionId: str | None = None
    taskId: str | None = None
    title: str
    url: str
    createdAt: str
    updatedAt: str


# ---------------------------------------------------------------------------
# Agents
# ---------------------------------------------------------------------------

class AgentCreate(BaseModel):
    name: str = Field(..., max_length=120)
    role: str = Field(default="", max_length=200)
    state: str = "idle"
    actor: str | None = None


class AgentUpdate(BaseModel):
    role: str | None = Field(default=None, max_length=200)
    state: str | None = None
    workingOnMissionId: str | None = None
    actor: str | None = None

    def to_patch(self) -> AgentPatch:
        return AgentPatch(**_patch_fields(self, {"actor"}))


class AgentOut(BaseModel):
    id: str
    name: str
    role: str
    state: str
    workingOnMissionId: str | None = None
    createdAt: str
    updatedAt: str


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class EventOut(BaseModel):
    id: str
    at: str
    actor: str
    action: str
    result: str
    message: str = ""
    projectId: str | None = None
    missionId: str | None = None
    taskId: str | None = None


# ---------------------------------------------------------------------------
# Seed
# ---------------------------------------------------------------------------

class SeedRequest(BaseModel):
    actor: str | None = None


class SeedOut(BaseModel):
    projectId: str
    missionId: str
