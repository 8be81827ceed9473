#  Mission Control - Logging Configuration
#
#  Configures structured logging with JSON or text format.
#  Provides context variables for request_id and actor propagation.
#
#  Depends on: (none)
#  Used by:    run.py, app.py, services/workflow.py

import contextvars
import json
import logging
import sys
import time

# Context variables for request tracing
request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)
actor_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("actor", default=None)


def set_request_id(rid: str | None):
    request_id_var.set(rid)


class JSONFormatter(logging.Formatter):
    """Emit log records as single-line JSON with context variables."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        rid = request_id_var.get(None)
        if rid:
            entry["request_id"] = rid
        actor = actor_var.get(None)
        if actor:
            entry["actor"] = actor
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


_TEXT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure structured logging for mission control.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        fmt: Log format: "json" for structured output, "text" for human-readable.
    """
    root = logging.getLogger("mission_control")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if fmt == "json":
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(handler)

    # Quiet noisy libraries
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
