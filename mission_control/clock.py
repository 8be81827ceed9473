#  Mission Control - Clock and Identifiers
#
#  Strictly increasing ISO-8601 timestamps and prefixed entity ids.
#  Event `at` values are the log's order key, so two calls in the same
#  process never return the same timestamp.
#
#  Depends on: (none)
#  Used by:    services/workflow.py, services/event_log.py

import threading
import uuid
from datetime import datetime, timedelta, timezone

_lock = threading.Lock()
_last: datetime | None = None

_ONE_MICROSECOND = timedelta(microseconds=1)


def format_iso(moment: datetime) -> str:
    """UTC datetime -> '2026-01-31T12:00:00.000000Z'."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def now_iso() -> str:
    """Current UTC time, strictly greater than any value previously returned."""
    global _last
    with _lock:
        current = datetime.now(timezone.utc)
        if _last is not None and current <= _last:
            current = _last + _ONE_MICROSECOND
        _last = current
        return format_iso(current)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"
