#  Mission Control - Transition Validator
#
#  Input checks that run before any write begins. Statuses are a closed
#  set, not a graph: any status may move to any other (Done -> Backlog is
#  legal). The gating power lives in approvals, whose own state machine
#  is enforced here too.
#
#  Depends on: models/enums.py, exceptions.py, config.py
#  Used by:    services/workflow.py

import math

from mission_control.config import PROJECT_NAME_MAX_LENGTH, TITLE_MAX_LENGTH
from mission_control.exceptions import ConflictError, ValidationError
from mission_control.models.enums import (
    AgentState,
    ApprovalState,
    EntityKind,
    Risk,
    WorkStatus,
)

STATUS_VALUES = tuple(s.value for s in WorkStatus)
RISK_VALUES = tuple(r.value for r in Risk)
AGENT_STATE_VALUES = tuple(s.value for s in AgentState)

_TERMINAL_APPROVAL_STATES = frozenset({ApprovalState.APPROVED, ApprovalState.REJECTED})


def validate_status(kind: EntityKind, proposed) -> str:
    """Return proposed if it is a board status, else raise ValidationError."""
    if not isinstance(proposed, str) or proposed not in STATUS_VALUES:
        raise ValidationError(
            f"Invalid {kind.value} status: {proposed!r}. "
            f"Allowed: {', '.join(STATUS_VALUES)}"
        )
    return proposed


def validate_risk(risk) -> str:
    if not isinstance(risk, str) or risk not in RISK_VALUES:
        raise ValidationError(f"Invalid risk: {risk!r}. Allowed: {', '.join(RISK_VALUES)}")
    return risk


def validate_cost(cost) -> float | None:
    """None clears the cost. Any finite real is accepted, including negatives."""
    if cost is None:
        return None
    if isinstance(cost, bool) or not isinstance(cost, (int, float)):
        raise ValidationError(f"costUsd must be a number or null, got {cost!r}")
    if not math.isfinite(cost):
        raise ValidationError(f"costUsd must be finite, got {cost!r}")
    return float(cost)


def validate_critical(critical) -> bool:
    if not isinstance(critical, bool):
        raise ValidationError(f"critical must be true or false, got {critical!r}")
    return critical


def validate_agent_state(state) -> str:
    if not isinstance(state, str) or state not in AGENT_STATE_VALUES:
        raise ValidationError(
            f"Invalid agent state: {state!r}. Allowed: {', '.join(AGENT_STATE_VALUES)}"
        )
    return state


def require_text(label: str, value, max_length: int = TITLE_MAX_LENGTH) -> str:
    """Non-empty after stripping, at most max_length characters. Returns the stripped text."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    text = value.strip()
    if len(text) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters")
    return text


def optional_text(value) -> str:
    """Free text where null means empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"Expected text, got {value!r}")
    return value


def project_name(value) -> str:
    return require_text("name", value, PROJECT_NAME_MAX_LENGTH)


def resolve_actor(actor: str | None, default: str) -> str:
    """Blank or missing actors fall back to the per-action policy default."""
    if actor is None or not str(actor).strip():
        return default
    return str(actor).strip()


def check_approval_transition(current: str, target: ApprovalState) -> None:
    """requested -> approved | rejected. Terminal states never move again."""
    if current in _TERMINAL_APPROVAL_STATES:
        raise ConflictError(f"Approval is already {current}; cannot change it to {target.value}")
    if current != ApprovalState.REQUESTED:
        raise ConflictError(f"Approval in unknown state {current!r}")
