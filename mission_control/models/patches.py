#  Mission Control - Partial Update Patches
#
#  Explicit per-entity patch structures for PATCH endpoints. Each field is
#  either UNSET (keep the stored value) or a new value, which may be None
#  for nullable columns. Only the named fields can ever be written.
#
#  Depends on: (none)
#  Used by:    models/schemas.py, services/workflow.py

from dataclasses import dataclass, fields
from typing import Any


class _Unset:
    """Marker for 'field not supplied'. Distinct from None, which clears."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class _Patch:

    def supplied(self) -> dict[str, Any]:
        """Fields that carry a value, keyed by column name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass(frozen=True)
class MissionPatch(_Patch):
    title: Any = UNSET
    objective: Any = UNSET
    status: Any = UNSET
    risk: Any = UNSET
    costUsd: Any = UNSET


@dataclass(frozen=True)
class TaskPatch(_Patch):
    title: Any = UNSET
    description: Any = UNSET
    status: Any = UNSET
    critical: Any = UNSET


@dataclass(frozen=True)
class AgentPatch(_Patch):
    role: Any = UNSET
    state: Any = UNSET
    workingOnMissionId: Any = UNSET
