#  Mission Control - Patch Tests
#
#  Supplied-vs-unset semantics of the partial update structures.
#
#  Depends on: mission_control/models/patches.py, mission_control/models/schemas.py
#  Used by:    pytest

from mission_control.models.patches import UNSET, MissionPatch, TaskPatch
from mission_control.models.schemas import AgentUpdate, MissionUpdate, TaskUpdate


class TestPatches:
    def test_nothing_supplied(self):
        assert MissionPatch().supplied() == {}

    def test_none_is_a_value(self):
        patch = MissionPatch(costUsd=None, status="Doing")
        assert patch.supplied() == {"costUsd": None, "status": "Doing"}

    def test_unset_is_falsy_singleton(self):
        assert not UNSET
        assert TaskPatch().title is UNSET


class TestSchemaToPatch:
    def test_only_sent_fields_become_patch_fields(self):
        body = MissionUpdate.model_validate({"status": "Review", "actor": "ops"})
        assert body.to_patch().supplied() == {"status": "Review"}

    def test_explicit_null_is_kept(self):
        body = MissionUpdate.model_validate({"costUsd": None})
        assert body.to_patch().supplied() == {"costUsd": None}

    def test_task_update(self):
        body = TaskUpdate.model_validate({"critical": True, "title": "New"})
        assert body.to_patch().supplied() == {"critical": True, "title": "New"}

    def test_agent_update(self):
        body = AgentUpdate.model_validate({"workingOnMissionId": None})
        assert body.to_patch().supplied() == {"workingOnMissionId": None}
