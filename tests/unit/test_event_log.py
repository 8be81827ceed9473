#  Mission Control - Event Log Tests
#
#  Append/query semantics: ordering, filters, limit capping, immutability
#  of history and transaction participation.
#
#  Depends on: mission_control/services/event_log.py, mission_control/db/connection.py
#  Used by:    pytest

import pytest

from mission_control.exceptions import ValidationError
from mission_control.services.event_log import EventLog


class TestAppend:
    async def test_assigns_id_and_timestamp(self, event_log):
        event = await event_log.append(actor="ALFRED", action="project.create", message="m")
        assert event["id"].startswith("evt_")
        assert event["at"].endswith("Z")
        assert event["result"] == "ok"

    async def test_keeps_supplied_id_and_at(self, event_log):
        event = await event_log.append(
            actor="ALFRED", action="x", event_id="evt_fixed", at="2026-01-01T00:00:00.000000Z",
        )
        rows = await event_log.query()
        assert rows[0]["id"] == "evt_fixed"
        assert rows[0]["at"] == event["at"]

    async def test_rejects_unknown_result(self, event_log):
        with pytest.raises(ValidationError):
            await event_log.append(actor="ALFRED", action="x", result="maybe")

    async def test_joins_caller_transaction(self, tmp_db, event_log):
        with pytest.raises(RuntimeError):
            async with tmp_db.transaction():
                await event_log.append(actor="ALFRED", action="x")
                raise RuntimeError("abort")
        assert await event_log.count() == 0


class TestQuery:
    async def test_newest_first(self, event_log):
        for i in range(3):
            await event_log.append(actor="ALFRED", action=f"a{i}")
        actions = [e["action"] for e in await event_log.query()]
        assert actions == ["a2", "a1", "a0"]

    async def test_equal_timestamps_keep_insertion_order(self, event_log):
        at = "2026-01-01T00:00:00.000000Z"
        await event_log.append(actor="ALFRED", action="first", at=at)
        await event_log.append(actor="ALFRED", action="second", at=at)
        actions = [e["action"] for e in await event_log.query()]
        assert actions == ["second", "first"]

    async def test_filters(self, event_log):
        await event_log.append(actor="A", action="x", project_id="p1", mission_id="m1")
        await event_log.append(actor="A", action="y", project_id="p1", mission_id="m2", task_id="t1")
        await event_log.append(actor="A", action="z", project_id="p2")
        assert len(await event_log.query(project_id="p1")) == 2
        assert [e["action"] for e in await event_log.query(mission_id="m2")] == ["y"]
        assert [e["action"] for e in await event_log.query(task_id="t1")] == ["y"]

    async def test_limit_is_capped(self, tmp_db):
        log = EventLog(tmp_db, max_query_limit=3)
        for i in range(5):
            await log.append(actor="A", action=f"a{i}")
        assert len(await log.query(limit=10_000)) == 3
        assert len(await log.query(limit=2)) == 2

    async def test_limit_floor_is_one(self, event_log):
        await event_log.append(actor="A", action="x")
        await event_log.append(actor="A", action="y")
        assert len(await event_log.query(limit=0)) == 1
