#  Mission Control - Event Log
#
#  Append-only audit trail. Rows in event_logs are never updated or
#  deleted; entity tables are the mutable view of current state.
#
#  Depends on: db/connection.py, clock.py, config.py
#  Used by:    container.py, services/workflow.py, routes/events.py

import logging
import sqlite3

from mission_control.clock import new_id, now_iso
from mission_control.config import EVENTS_DEFAULT_LIMIT, EVENTS_MAX_QUERY_LIMIT
from mission_control.db.connection import Database
from mission_control.exceptions import StorageError, ValidationError
from mission_control.models.enums import EventResult

logger = logging.getLogger("mission_control.events")

_RESULT_VALUES = tuple(r.value for r in EventResult)

_COLUMNS = ("id", "at", "actor", "action", "result", "message", "projectId", "missionId", "taskId")


def row_to_event(row) -> dict:
    event = {col: row[col] for col in _COLUMNS}
    event["message"] = event["message"] or ""
    return event


class EventLog:
    """Writes and reads the event_logs table.

    append() joins the caller's transaction when called inside
    Database.transaction(), so an entity mutation and its event commit
    or roll back together.
    """

    def __init__(self, db: Database, max_query_limit: int = EVENTS_MAX_QUERY_LIMIT):
        self._db = db
        self._max_query_limit = max_query_limit

    @property
    def max_query_limit(self) -> int:
        return self._max_query_limit

    async def append(
        self,
        *,
        actor: str,
        action: str,
        result: EventResult | str = EventResult.OK,
        message: str = "",
        project_id: str | None = None,
        mission_id: str | None = None,
        task_id: str | None = None,
        event_id: str | None = None,
        at: str | None = None,
    ) -> dict:
        """Persist one event and return it as written."""
        result_value = result.value if isinstance(result, EventResult) else result
        if result_value not in _RESULT_VALUES:
            raise ValidationError(f"Invalid event result: {result_value!r}")

        event = {
            "id": event_id or new_id("evt"),
            "at": at or now_iso(),
            "actor": actor,
            "action": action,
            "result": result_value,
            "message": message,
            "projectId": project_id,
            "missionId": mission_id,
            "taskId": task_id,
        }

        try:
            await self._db.execute_write(
                "INSERT INTO event_logs (id, at, actor, action, result, message, projectId, missionId, taskId) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                tuple(event[col] for col in _COLUMNS),
            )
        except sqlite3.Error as e:
            logger.error("Event append failed (%s %s): %s", action, event["id"], e)
            raise StorageError(f"Could not record event {action}") from e

        return event

    async def query(
        self,
        limit: int = EVENTS_DEFAULT_LIMIT,
        *,
        project_id: str | None = None,
        mission_id: str | None = None,
        task_id: str | None = None,
    ) -> list[dict]:
        """Newest first. limit is clamped to [1, max_query_limit]."""
        limit = max(1, min(int(limit), self._max_query_limit))

        query = "SELECT * FROM event_logs WHERE 1=1"
        params: list = []
        if project_id:
            query += " AND projectId = ?"
            params.append(project_id)
        if mission_id:
            query += " AND missionId = ?"
            params.append(mission_id)
        if task_id:
            query += " AND taskId = ?"
            params.append(task_id)
        # rowid breaks ties between equal timestamps in insertion order
        query += " ORDER BY at DESC, rowid DESC LIMIT ?"
        params.append(limit)

        rows = await self._db.fetchall(query, params)
        return [row_to_event(r) for r in rows]

    async def count(self) -> int:
        row = await self._db.fetchone("SELECT COUNT(*) AS cnt FROM event_logs")
        return row["cnt"]
