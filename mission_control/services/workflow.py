#  Mission Control - Workflow Engine
#
#  Every state-changing operation on the workboard. Each one is a single
#  unit: validate -> mutate -> append exactly one event -> commit ->
#  broadcast the committed event. Input checks run before the transaction
#  opens; existence checks run inside it so they see committed state.
#
#  Depends on: db/connection.py, services/event_log.py, services/broadcaster.py,
#              services/transitions.py, clock.py, config.py
#  Used by:    container.py, routes/*

import logging
import sqlite3
from contextlib import asynccontextmanager
from dataclasses import dataclass

from mission_control.clock import new_id, now_iso
from mission_control.config import HUMAN_ACTOR, SYSTEM_ACTOR
from mission_control.db.connection import Database
from mission_control.exceptions import (
    NotFoundError,
    StorageError,
    UnknownReferenceError,
    ValidationError,
)
from mission_control.logging_config import actor_var
from mission_control.models.enums import (
    EXECUTION_STATUSES,
    AgentState,
    ApprovalState,
    EntityKind,
    EventResult,
    Risk,
    WorkStatus,
)
from mission_control.models.patches import AgentPatch, MissionPatch, TaskPatch
from mission_control.services import transitions
from mission_control.services.broadcaster import EventBroadcaster
from mission_control.services.event_log import EventLog

logger = logging.getLogger("mission_control.workflow")


# ---------------------------------------------------------------------------
# Row helpers
# ---------------------------------------------------------------------------

def row_to_project(row) -> dict:
    return {
        "id": row["id"],
        "name": row["name"],
        "createdAt": row["createdAt"],
        "updatedAt": row["updatedAt"],
    }


def row_to_mission(row) -> dict:
    return {
        "id": row["id"],
        "projectId": row["projectId"],
        "title": row["title"],
        "objective": row["objective"] or "",
        "status": row["status"],
        "risk": row["risk"],
        "costUsd": row["costUsd"],
        "createdAt": row["createdAt"],
        "updatedAt": row["updatedAt"],
    }


def row_to_task(row) -> dict:
    return {
        "id": row["id"],
        "missionId": row["missionId"],
        "title": row["title"],
        "description": row["description"] or "",
        "status": row["status"],
        "critical": bool(row["critical"]),
        "createdAt": row["createdAt"],
        "updatedAt": row["updatedAt"],
    }


def row_to_approval(row) -> dict:
    return {
        "id": row["id"],
        "missionId": row["missionId"],
        "taskId": row["taskId"],
        "title": row["title"],
        "state": row["state"],
        "requestedBy": row["requestedBy"],
        "requestedAt": row["requestedAt"],
        "approvedAt": row["approvedAt"],
        "createdAt": row["createdAt"],
        "updatedAt": row["updatedAt"],
    }


def row_to_artifact(row) -> dict:
    return {
        "id": row["id"],
        "missionId": row["missionId"],
        "taskId": row["taskId"],
        "title": row["title"],
        "kind": row["kind"],
        "ref": row["ref"],
        "createdAt": row["createdAt"],
        "updatedAt": row["updatedAt"],
    }


def row_to_link(row) -> dict:
    return {
        "id": row["id"],
        "missionId": row["missionId"],
        "taskId": row["taskId"],
        "title": row["title"],
        "url": row["url"],
        "createdAt": row["createdAt"],
        "updatedAt": row["updatedAt"],
    }


def row_to_agent(row) -> dict:
    return {
        "id": row["id"],
        "name": row["name"],
        "role": row["role"],
        "state": row["state"],
        "workingOnMissionId": row["workingOnMissionId"],
        "createdAt": row["createdAt"],
        "updatedAt": row["updatedAt"],
    }


def _describe_changes(before: dict, changes: dict) -> str:
    """Human-readable summary of a patch, e.g. 'status Backlog -> Doing'."""
    parts = [
        f"{field} {before.get(field)!r} -> {value!r}" if field != "status"
        else f"status {before.get(field)} -> {value}"
        for field, value in changes.items()
        if before.get(field) != value
    ]
    return ", ".join(parts) if parts else "no changes"


@dataclass
class OkExecuteOutcome:
    """What OK EXECUTAR did: approved one approval, or nothing (noop)."""
    result: EventResult
    approval: dict | None
    event: dict


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class WorkflowEngine:
    """Atomic mutations of projects, missions, tasks, approvals and friends.

    The entity write and its event commit together or not at all. The
    event is broadcast only after commit, so observers never see an event
    for state that was rolled back.
    """

    def __init__(
        self,
        db: Database,
        event_log: EventLog,
        broadcaster: EventBroadcaster,
        *,
        system_actor: str = SYSTEM_ACTOR,
        human_actor: str = HUMAN_ACTOR,
    ):
        self._db = db
        self._events = event_log
        self._broadcaster = broadcaster
        self._system_actor = system_actor
        self._human_actor = human_actor

    @asynccontextmanager
    async def _atomic(self):
        """Transaction that surfaces driver failures as StorageError."""
        try:
            async with self._db.transaction() as conn:
                yield conn
        except sqlite3.Error as e:
            logger.error("Transaction rolled back: %s", e)
            raise StorageError("Storage failure; no changes were made") from e

    def _publish(self, event: dict) -> None:
        token = actor_var.set(event["actor"])
        try:
            logger.info("%s [%s] %s", event["action"], event["result"], event["message"])
            self._broadcaster.broadcast(event)
        finally:
            actor_var.reset(token)

    # -- lookups ------------------------------------------------------------

    async def _get_project(self, project_id, missing=NotFoundError) -> dict:
        row = await self._db.fetchone("SELECT * FROM projects WHERE id = ?", (project_id,))
        if not row:
            raise missing(f"Project {project_id} not found")
        return row_to_project(row)

    async def _get_mission(self, mission_id, missing=NotFoundError) -> dict:
        row = await self._db.fetchone("SELECT * FROM missions WHERE id = ?", (mission_id,))
        if not row:
            raise missing(f"Mission {mission_id} not found")
        return row_to_mission(row)

    async def _get_task(self, task_id, missing=NotFoundError) -> dict:
        row = await self._db.fetchone("SELECT * FROM tasks WHERE id = ?", (task_id,))
        if not row:
            raise missing(f"Task {task_id} not found")
        return row_to_task(row)

    async def _get_approval(self, approval_id) -> dict:
        row = await self._db.fetchone("SELECT * FROM approvals WHERE id = ?", (approval_id,))
        if not row:
            raise NotFoundError(f"Approval {approval_id} not found")
        return row_to_approval(row)

    async def _get_agent(self, agent_id) -> dict:
        row = await self._db.fetchone("SELECT * FROM agents WHERE id = ?", (agent_id,))
        if not row:
            raise NotFoundError(f"Agent {agent_id} not found")
        return row_to_agent(row)

    async def _touch_mission(self, mission_id: str, now: str) -> None:
        await self._db.execute_write(
            "UPDATE missions SET updatedAt = ? WHERE id = ?", (now, mission_id),
        )

    async def _task_in_mission(self, mission_id: str, task_id: str | None) -> dict | None:
        """Resolve an optional body taskId that must belong to mission_id."""
        if not task_id:
            return None
        task = await self._get_task(task_id, missing=UnknownReferenceError)
        if task["missionId"] != mission_id:
            raise ValidationError(f"Task {task_id} does not belong to mission {mission_id}")
        return task

    async def _approval_linkage(self, approval: dict) -> tuple[str | None, str | None]:
        """(projectId, missionId) for an approval, walking task -> mission -> project."""
        mission_id = approval["missionId"]
        if not mission_id and approval["taskId"]:
            row = await self._db.fetchone(
                "SELECT missionId FROM tasks WHERE id = ?", (approval["taskId"],),
            )
            mission_id = row["missionId"] if row else None
        if not mission_id:
            return None, None
        row = await self._db.fetchone("SELECT projectId FROM missions WHERE id = ?", (mission_id,))
        return (row["projectId"] if row else None), mission_id

    async def _has_approved_gate(self, task: dict) -> bool:
        row = await self._db.fetchone(
            "SELECT 1 FROM approvals WHERE state = ? AND (taskId = ? OR missionId = ?) LIMIT 1",
            (ApprovalState.APPROVED, task["id"], task["missionId"]),
        )
        return row is not None

    # -- queries ------------------------------------------------------------

    async def list_projects(self) -> list[dict]:
        rows = await self._db.fetchall("SELECT * FROM projects ORDER BY updatedAt DESC")
        return [row_to_project(r) for r in rows]

    async def list_missions(self, project_id: str | None = None) -> list[dict]:
        if project_id:
            rows = await self._db.fetchall(
                "SELECT * FROM missions WHERE projectId = ? ORDER BY updatedAt DESC", (project_id,),
            )
        else:
            rows = await self._db.fetchall("SELECT * FROM missions ORDER BY updatedAt DESC")
        return [row_to_mission(r) for r in rows]

    async def list_tasks(self, mission_id: str) -> list[dict]:
        rows = await self._db.fetchall(
            "SELECT * FROM tasks WHERE missionId = ? ORDER BY updatedAt DESC", (mission_id,),
        )
        return [row_to_task(r) for r in rows]

    async def list_approvals(self, *, mission_id: str | None = None, task_id: str | None = None) -> list[dict]:
        if task_id:
            where, param = "taskId = ?", task_id
        elif mission_id:
            where, param = "missionId = ?", mission_id
        else:
            raise ValidationError("missionId or taskId is required")
        rows = await self._db.fetchall(
            f"SELECT * FROM approvals WHERE {where} ORDER BY updatedAt DESC, rowid DESC", (param,),
        )
        return [row_to_approval(r) for r in rows]

    async def list_artifacts(self, mission_id: str) -> list[dict]:
        rows = await self._db.fetchall(
            "SELECT * FROM artifacts WHERE missionId = ? ORDER BY createdAt DESC", (mission_id,),
        )
        return [row_to_artifact(r) for r in rows]

    async def list_links(self, mission_id: str) -> list[dict]:
        rows = await self._db.fetchall(
            "SELECT * FROM links WHERE missionId = ? ORDER BY createdAt DESC", (mission_id,),
        )
        return [row_to_link(r) for r in rows]

    async def list_agents(self) -> list[dict]:
        rows = await self._db.fetchall("SELECT * FROM agents ORDER BY name")
        return [row_to_agent(r) for r in rows]

    # -- projects -----------------------------------------------------------

    async def create_project(self, name, actor: str | None = None) -> dict:
        name = transitions.project_name(name)
        actor = transitions.resolve_actor(actor, self._human_actor)

        async with self._atomic():
            now = now_iso()
            project = {"id": new_id("proj"), "name": name, "createdAt": now, "updatedAt": now}
            await self._db.execute_write(
                "INSERT INTO projects (id, name, createdAt, updatedAt) VALUES (?, ?, ?, ?)",
                (project["id"], name, now, now),
            )
            event = await self._events.append(
                actor=actor, action="project.create",
                message=f"Created project: {name}",
                project_id=project["id"],
            )

        self._publish(event)
        return project

    async def delete_project(self, project_id: str, actor: str | None = None) -> None:
        """Delete a project. Missions and their tasks go with it; events stay."""
        actor = transitions.resolve_actor(actor, self._human_actor)

        async with self._atomic():
            project = await self._get_project(project_id)
            row = await self._db.fetchone(
                "SELECT COUNT(*) AS cnt FROM missions WHERE projectId = ?", (project_id,),
            )
            await self._db.execute_write("DELETE FROM projects WHERE id = ?", (project_id,))
            event = await self._events.append(
                actor=actor, action="project.delete",
                message=f"Deleted project: {project['name']} ({row['cnt']} missions)",
                project_id=project_id,
            )

        self._publish(event)

    # -- missions -----------------------------------------------------------

    async def create_mission(
        self,
        project_id: str,
        title,
        objective="",
        status=WorkStatus.BACKLOG.value,
        risk=Risk.LOW.value,
        cost_usd=None,
        actor: str | None = None,
    ) -> dict:
        title = transitions.require_text("title", title)
        objective = transitions.optional_text(objective)
        status = transitions.validate_status(EntityKind.MISSION, status)
        risk = transitions.validate_risk(risk)
        cost_usd = transitions.validate_cost(cost_usd)
        actor = transitions.resolve_actor(actor, self._human_actor)

        async with self._atomic():
            await self._get_project(project_id, missing=UnknownReferenceError)
            now = now_iso()
            mission = {
                "id": new_id("msn"),
                "projectId": project_id,
                "title": title,
                "objective": objective,
                "status": status,
                "risk": risk,
                "costUsd": cost_usd,
                "createdAt": now,
                "updatedAt": now,
            }
            await self._db.execute_write(
                "INSERT INTO missions (id, projectId, title, objective, status, risk, costUsd, createdAt, updatedAt) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (mission["id"], project_id, title, objective, status, risk, cost_usd, now, now),
            )
            event = await self._events.append(
                actor=actor, action="mission.create",
                message=f"Created mission: {title}",
                project_id=project_id, mission_id=mission["id"],
            )

        self._publish(event)
        return mission

    def _mission_changes(self, patch: MissionPatch) -> dict:
        values = patch.supplied()
        changes = {}
        if "title" in values:
            changes["title"] = transitions.require_text("title", values["title"])
        if "objective" in values:
            changes["objective"] = transitions.optional_text(values["objective"])
        if "status" in values:
            changes["status"] = transitions.validate_status(EntityKind.MISSION, values["status"])
        if "risk" in values:
            changes["risk"] = transitions.validate_risk(values["risk"])
        if "costUsd" in values:
            changes["costUsd"] = transitions.validate_cost(values["costUsd"])
        return changes

    async def update_mission(self, mission_id: str, patch: MissionPatch, actor: str | None = None) -> dict:
        """Apply the supplied fields; everything else keeps its stored value."""
        changes = self._mission_changes(patch)
        actor = transitions.resolve_actor(actor, self._system_actor)

        async with self._atomic():
            current = await self._get_mission(mission_id)
            mission = {**current, **changes, "updatedAt": now_iso()}
            await self._db.execute_write(
                "UPDATE missions SET title = ?, objective = ?, status = ?, risk = ?, costUsd = ?, updatedAt = ? "
                "WHERE id = ?",
                (mission["title"], mission["objective"], mission["status"], mission["risk"],
                 mission["costUsd"], mission["updatedAt"], mission_id),
            )
            event = await self._events.append(
                actor=actor, action="mission.update",
                message=f"{current['title']}: {_describe_changes(current, changes)}",
                project_id=mission["projectId"], mission_id=mission_id,
            )

        self._publish(event)
        return mission

    # -- tasks --------------------------------------------------------------

    async def create_task(
        self,
        mission_id: str,
        title,
        description="",
        status=WorkStatus.BACKLOG.value,
        critical=False,
        actor: str | None = None,
    ) -> dict:
        title = transitions.require_text("title", title)
        description = transitions.optional_text(description)
        status = transitions.validate_status(EntityKind.TASK, status)
        critical = transitions.validate_critical(critical)
        actor = transitions.resolve_actor(actor, self._human_actor)

        async with self._atomic():
            mission = await self._get_mission(mission_id)
            now = now_iso()
            task = {
                "id": new_id("tsk"),
                "missionId": mission_id,
                "title": title,
                "description": description,
                "status": status,
                "critical": critical,
                "createdAt": now,
                "updatedAt": now,
            }
            await self._db.execute_write(
                "INSERT INTO tasks (id, missionId, title, description, status, critical, createdAt, updatedAt) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (task["id"], mission_id, title, description, status, int(critical), now, now),
            )
            await self._touch_mission(mission_id, now)
            event = await self._events.append(
                actor=actor, action="task.create",
                message=f"Created task: {title}",
                project_id=mission["projectId"], mission_id=mission_id, task_id=task["id"],
            )
            if critical and status in EXECUTION_STATUSES and not await self._has_approved_gate(task):
                logger.warning("Critical task %s created in %s without an approved approval", task["id"], status)

        self._publish(event)
        return task

    def _task_changes(self, patch: TaskPatch) -> dict:
        values = patch.supplied()
        changes = {}
        if "title" in values:
            changes["title"] = transitions.require_text("title", values["title"])
        if "description" in values:
            changes["description"] = transitions.optional_text(values["description"])
        if "status" in values:
            changes["status"] = transitions.validate_status(EntityKind.TASK, values["status"])
        if "critical" in values:
            changes["critical"] = transitions.validate_critical(values["critical"])
        return changes

    async def update_task(self, task_id: str, patch: TaskPatch, actor: str | None = None) -> dict:
        changes = self._task_changes(patch)
        actor = transitions.resolve_actor(actor, self._system_actor)

        async with self._atomic():
            current = await self._get_task(task_id)
            mission = await self._get_mission(current["missionId"])
            now = now_iso()
            task = {**current, **changes, "updatedAt": now}
            await self._db.execute_write(
                "UPDATE tasks SET title = ?, description = ?, status = ?, critical = ?, updatedAt = ? WHERE id = ?",
                (task["title"], task["description"], task["status"], int(task["critical"]), now, task_id),
            )
            await self._touch_mission(task["missionId"], now)
            event = await self._events.append(
                actor=actor, action="task.update",
                message=f"{current['title']}: {_describe_changes(current, changes)}",
                project_id=mission["projectId"], mission_id=task["missionId"], task_id=task_id,
            )

            entering_execution = task["status"] in EXECUTION_STATUSES and (
                current["status"] != task["status"] or not current["critical"]
            )
            if task["critical"] and entering_execution and not await self._has_approved_gate(task):
                logger.warning(
                    "Critical task %s moved to %s without an approved approval", task_id, task["status"],
                )

        self._publish(event)
        return task

    # -- approvals ----------------------------------------------------------

    async def request_approval(
        self,
        *,
        title,
        mission_id: str | None = None,
        task_id: str | None = None,
        requested_by: str | None = None,
        actor: str | None = None,
    ) -> dict:
        # Empty ids in a body mean "not given"
        mission_id = mission_id or None
        task_id = task_id or None
        if not mission_id and not task_id:
            raise ValidationError("missionId or taskId is required")
        title = transitions.require_text("title", title)
        requested_by = transitions.resolve_actor(requested_by, self._system_actor)
        actor = transitions.resolve_actor(actor, self._system_actor)

        async with self._atomic():
            task = await self._get_task(task_id, missing=UnknownReferenceError) if task_id else None
            if mission_id:
                mission = await self._get_mission(mission_id, missing=UnknownReferenceError)
                if task and task["missionId"] != mission_id:
                    raise ValidationError(f"Task {task_id} does not belong to mission {mission_id}")
            else:
                mission = await self._get_mission(task["missionId"])

            now = now_iso()
            approval = {
                "id": new_id("apv"),
                "missionId": mission_id,
                "taskId": task_id,
                "title": title,
                "state": ApprovalState.REQUESTED.value,
                "requestedBy": requested_by,
                "requestedAt": now,
                "approvedAt": None,
                "createdAt": now,
                "updatedAt": now,
            }
            await self._db.execute_write(
                "INSERT INTO approvals (id, missionId, taskId, title, state, requestedBy, requestedAt, "
                "approvedAt, createdAt, updatedAt) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (approval["id"], mission_id, task_id, title, approval["state"], requested_by,
                 now, None, now, now),
            )
            event = await self._events.append(
                actor=actor, action="approval.request",
                message=f"Approval requested: {title}",
                project_id=mission["projectId"], mission_id=mission["id"], task_id=task_id,
            )

        self._publish(event)
        return approval

    async def _decide(self, approval: dict, target: ApprovalState, actor: str) -> tuple[dict, dict]:
        """Move a requested approval to target inside the caller's transaction."""
        transitions.check_approval_transition(approval["state"], target)
        now = now_iso()
        decided = {
            **approval,
            "state": target.value,
            "approvedAt": now if target == ApprovalState.APPROVED else approval["approvedAt"],
            "updatedAt": now,
        }
        await self._db.execute_write(
            "UPDATE approvals SET state = ?, approvedAt = ?, updatedAt = ? WHERE id = ?",
            (decided["state"], decided["approvedAt"], now, approval["id"]),
        )
        project_id, mission_id = await self._approval_linkage(approval)
        verb = "Approved" if target == ApprovalState.APPROVED else "Rejected"
        event = await self._events.append(
            actor=actor,
            action="approval.approve" if target == ApprovalState.APPROVED else "approval.reject",
            message=f"{verb}: {approval['title']}",
            project_id=project_id, mission_id=mission_id, task_id=approval["taskId"],
        )
        return decided, event

    async def approve_approval(self, approval_id: str, actor: str | None = None) -> dict:
        actor = transitions.resolve_actor(actor, self._human_actor)
        async with self._atomic():
            current = await self._get_approval(approval_id)
            approval, event = await self._decide(current, ApprovalState.APPROVED, actor)
        self._publish(event)
        return approval

    async def reject_approval(self, approval_id: str, actor: str | None = None) -> dict:
        actor = transitions.resolve_actor(actor, self._human_actor)
        async with self._atomic():
            current = await self._get_approval(approval_id)
            approval, event = await self._decide(current, ApprovalState.REJECTED, actor)
        self._publish(event)
        return approval

    async def ok_execute(self, mission_id: str, actor: str | None = None) -> OkExecuteOutcome:
        """OK EXECUTAR: approve the newest pending approval of a mission.

        With nothing pending the mission is left untouched and a noop event
        is recorded instead, so the operator's click is still audited.
        """
        async with self._atomic():
            mission = await self._get_mission(mission_id)
            row = await self._db.fetchone(
                "SELECT * FROM approvals WHERE missionId = ? AND state = ? "
                "ORDER BY updatedAt DESC, rowid DESC LIMIT 1",
                (mission_id, ApprovalState.REQUESTED),
            )

            if row is None:
                event = await self._events.append(
                    actor=transitions.resolve_actor(actor, self._system_actor),
                    action="approval.ok_executar",
                    result=EventResult.NOOP,
                    message=f"{mission['title']}: no pending approval",
                    project_id=mission["projectId"], mission_id=mission_id,
                )
                outcome = OkExecuteOutcome(EventResult.NOOP, None, event)
            else:
                approval, event = await self._decide(
                    row_to_approval(row), ApprovalState.APPROVED,
                    transitions.resolve_actor(actor, self._human_actor),
                )
                await self._touch_mission(mission_id, approval["updatedAt"])
                outcome = OkExecuteOutcome(EventResult.OK, approval, event)

        self._publish(outcome.event)
        return outcome

    # -- artifacts / links --------------------------------------------------

    async def create_artifact(
        self,
        mission_id: str,
        title,
        ref,
        kind="file",
        task_id: str | None = None,
        actor: str | None = None,
    ) -> dict:
        title = transitions.require_text("title", title)
        kind = transitions.require_text("kind", kind, 50)
        ref = transitions.require_text("ref", ref, 2000)
        actor = transitions.resolve_actor(actor, self._human_actor)
        task_id = task_id or None

        async with self._atomic():
            mission = await self._get_mission(mission_id)
            await self._task_in_mission(mission_id, task_id)
            now = now_iso()
            artifact = {
                "id": new_id("art"),
                "missionId": mission_id,
                "taskId": task_id,
                "title": title,
                "kind": kind,
                "ref": ref,
                "createdAt": now,
                "updatedAt": now,
            }
            await self._db.execute_write(
                "INSERT INTO artifacts (id, missionId, taskId, title, kind, ref, createdAt, updatedAt) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (artifact["id"], mission_id, task_id, title, kind, ref, now, now),
            )
            event = await self._events.append(
                actor=actor, action="artifact.create",
                message=f"Attached {kind}: {title}",
                project_id=mission["projectId"], mission_id=mission_id, task_id=task_id,
            )

        self._publish(event)
        return artifact

    async def create_link(
        self,
        mission_id: str,
        title,
        url,
        task_id: str | None = None,
        actor: str | None = None,
    ) -> dict:
        title = transitions.require_text("title", title)
        url = transitions.require_text("url", url, 2000)
        actor = transitions.resolve_actor(actor, self._human_actor)
        task_id = task_id or None

        async with self._atomic():
            mission = await self._get_mission(mission_id)
            await self._task_in_mission(mission_id, task_id)
            now = now_iso()
            link = {
                "id": new_id("lnk"),
                "missionId": mission_id,
                "taskId": task_id,
                "title": title,
                "url": url,
                "createdAt": now,
                "updatedAt": now,
            }
            await self._db.execute_write(
                "INSERT INTO links (id, missionId, taskId, title, url, createdAt, updatedAt) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (link["id"], mission_id, task_id, title, url, now, now),
            )
            event = await self._events.append(
                actor=actor, action="link.create",
                message=f"Linked: {title}",
                project_id=mission["projectId"], mission_id=mission_id, task_id=task_id,
            )

        self._publish(event)
        return link

    # -- agents -------------------------------------------------------------

    async def create_agent(
        self, name, role="", state=AgentState.IDLE.value, actor: str | None = None,
    ) -> dict:
        name = transitions.require_text("name", name, 120)
        role = transitions.optional_text(role)
        state = transitions.validate_agent_state(state)
        actor = transitions.resolve_actor(actor, self._system_actor)

        async with self._atomic():
            now = now_iso()
            agent = {
                "id": new_id("agt"),
                "name": name,
                "role": role,
                "state": state,
                "workingOnMissionId": None,
                "createdAt": now,
                "updatedAt": now,
            }
            await self._db.execute_write(
                "INSERT INTO agents (id, name, role, state, workingOnMissionId, createdAt, updatedAt) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (agent["id"], name, role, state, None, now, now),
            )
            event = await self._events.append(
                actor=actor, action="agent.create", message=f"Registered agent: {name} ({state})",
            )

        self._publish(event)
        return agent

    async def update_agent(self, agent_id: str, patch: AgentPatch, actor: str | None = None) -> dict:
        values = patch.supplied()
        changes = {}
        if "role" in values:
            changes["role"] = transitions.optional_text(values["role"])
        if "state" in values:
            changes["state"] = transitions.validate_agent_state(values["state"])
        if "workingOnMissionId" in values:
            changes["workingOnMissionId"] = values["workingOnMissionId"] or None
        actor = transitions.resolve_actor(actor, self._system_actor)

        async with self._atomic():
            current = await self._get_agent(agent_id)
            agent = {**current, **changes, "updatedAt": now_iso()}
            project_id = None
            if agent["workingOnMissionId"]:
                mission = await self._get_mission(agent["workingOnMissionId"], missing=UnknownReferenceError)
                project_id = mission["projectId"]
            await self._db.execute_write(
                "UPDATE agents SET role = ?, state = ?, workingOnMissionId = ?, updatedAt = ? WHERE id = ?",
                (agent["role"], agent["state"], agent["workingOnMissionId"], agent["updatedAt"], agent_id),
            )
            event = await self._events.append(
                actor=actor, action="agent.update",
                message=f"{current['name']}: {_describe_changes(current, changes)}",
                project_id=project_id, mission_id=agent["workingOnMissionId"],
            )

        self._publish(event)
        return agent

    # -- demo data ----------------------------------------------------------

    async def seed_demo(self, actor: str | None = None) -> dict:
        """Create a small demo board in one transaction. Returns its ids."""
        actor = transitions.resolve_actor(actor, self._system_actor)

        async with self._atomic():
            now = now_iso()
            project_id = new_id("proj")
            mission_id = new_id("msn")
            await self._db.execute_write(
                "INSERT INTO projects (id, name, createdAt, updatedAt) VALUES (?, ?, ?, ?)",
                (project_id, "Mission Control (demo)", now, now),
            )
            await self._db.execute_write(
                "INSERT INTO missions (id, projectId, title, objective, status, risk, costUsd, createdAt, updatedAt) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    mission_id, project_id, "Ship the Mission Control MVP",
                    "Board with missions, tasks, approvals and a live event feed.",
                    WorkStatus.DOING, Risk.LOW, 0.30, now, now,
                ),
            )

            demo_tasks = [
                ("Define the board states, including control states", WorkStatus.DOING, False),
                ("Design the OK EXECUTAR approval flow", WorkStatus.NEEDS_APPROVAL, True),
                ("Pick the backend stack", WorkStatus.BACKLOG, False),
                ("Wire the live event feed", WorkStatus.BACKLOG, False),
            ]
            gated_task_id = None
            for title, status, critical in demo_tasks:
                task_id = new_id("tsk")
                if critical:
                    gated_task_id = task_id
                await self._db.execute_write(
                    "INSERT INTO tasks (id, missionId, title, description, status, critical, createdAt, updatedAt) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (task_id, mission_id, title, "", status, int(critical), now, now),
                )

            await self._db.execute_write(
                "INSERT INTO approvals (id, missionId, taskId, title, state, requestedBy, requestedAt, "
                "approvedAt, createdAt, updatedAt) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    new_id("apv"), mission_id, gated_task_id, "Approve the MVP architecture",
                    ApprovalState.REQUESTED, self._system_actor, now, None, now, now,
                ),
            )
            event = await self._events.append(
                actor=actor, action="seed.demo",
                message=f"Seeded demo board: {len(demo_tasks)} tasks, 1 pending approval",
                project_id=project_id, mission_id=mission_id,
            )

        self._publish(event)
        return {"projectId": project_id, "missionId": mission_id}
