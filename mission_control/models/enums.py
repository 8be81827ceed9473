#  Mission Control - Enums
#
#  Closed vocabularies used across the system.
#
#  Depends on: (none)
#  Used by:    models/schemas.py, services/*, routes/*

from enum import Enum


class WorkStatus(str, Enum):
    """Board column for missions and tasks. Any status may move to any other."""
    BACKLOG = "Backlog"
    DOING = "Doing"
    REVIEW = "Review"
    DONE = "Done"
    BLOCKED = "Blocked"
    NEEDS_APPROVAL = "Needs Approval"
    NEEDS_INFO = "Needs Info"
    ARCHIVED = "Archived"


class Risk(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ApprovalState(str, Enum):
    REQUESTED = "requested"
    APPROVED = "approved"    # terminal
    REJECTED = "rejected"    # terminal


class EventResult(str, Enum):
    OK = "ok"
    NOOP = "noop"            # Quiescent outcome, recorded for audit continuity
    ERROR = "error"


class AgentState(str, Enum):
    ACTIVE = "active"
    IDLE = "idle"
    BLOCKED = "blocked"


class EntityKind(str, Enum):
    MISSION = "mission"
    TASK = "task"


# Statuses a critical task should only enter after an approval
EXECUTION_STATUSES = frozenset({WorkStatus.DOING, WorkStatus.DONE})
