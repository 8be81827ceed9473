#  Mission Control - Configuration
#
#  Loads config.json and provides typed access to all settings.
#  Dot-notation path lookup: cfg("server.port")
#  Deployment secrets and paths can be overridden from the environment.
#
#  Depends on: config.json
#  Used by:    all mission_control modules

import json
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = PROJECT_ROOT / "config.json"
DATA_DIR = PROJECT_ROOT / "data"

# ---------------------------------------------------------------------------
# Load config
# ---------------------------------------------------------------------------

_config: dict = {}


def _load_config(path: Path | None = None):
    """Load configuration from JSON file (internal: called once at import time).

    Module-level constants below are snapshots from _config.
    Do not call this function after import: constants won't update.
    """
    global _config
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}. "
            "Copy config.example.json to config.json."
        )
    with open(config_path) as f:
        _config = json.load(f)


# Auto-load if config exists at import time
if CONFIG_PATH.exists():
    _load_config()


def cfg(path: str, default=None):
    """Get a config value by dot-notation path.

    Example: cfg("events.max_query_limit") -> 500
    """
    keys = path.split(".")
    val = _config
    for key in keys:
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val


# ---------------------------------------------------------------------------
# Convenience constants
# ---------------------------------------------------------------------------

HOST = cfg("server.host", "0.0.0.0")
PORT = int(os.environ.get("PORT", cfg("server.port", 3000)))
CORS_ORIGINS = cfg("server.cors_origins", ["*"])

# Storage
DB_PATH = Path(os.environ.get("MC_DB_PATH") or cfg("database.path", str(DATA_DIR / "mission-control.sqlite")))

# Auth: single shared bearer credential
AUTH_TOKEN = os.environ.get("MC_AUTH_TOKEN") or cfg("auth.token", "")

# Event log / live channel
EVENTS_DEFAULT_LIMIT = cfg("events.default_limit", 200)
EVENTS_MAX_QUERY_LIMIT = cfg("events.max_query_limit", 500)
EVENTS_SUBSCRIBER_QUEUE_SIZE = cfg("events.subscriber_queue_size", 100)
EVENTS_KEEPALIVE_SECONDS = cfg("events.keepalive_seconds", 15.0)

# Actor policy: who an action is attributed to when the caller doesn't say
SYSTEM_ACTOR = cfg("actors.system", "ALFRED")
HUMAN_ACTOR = cfg("actors.human", "FILIPE")

# Field bounds
PROJECT_NAME_MAX_LENGTH = 120
TITLE_MAX_LENGTH = 200


# ---------------------------------------------------------------------------
# Startup validation
# ---------------------------------------------------------------------------

def validate_config():
    """Validate critical config values. Call during app startup (not at import time).

    Raises ConfigError for fatal issues, logs warnings for non-fatal ones.
    """
    import logging
    _logger = logging.getLogger("mission_control.config")

    # Fatal: every /api path sits behind the bearer token
    if not AUTH_TOKEN:
        raise ConfigError(
            "FATAL: no auth token configured. Set MC_AUTH_TOKEN or auth.token "
            "in config.json. Refusing to start."
        )

    if len(AUTH_TOKEN) < 16:
        _logger.warning("Auth token is shorter than 16 characters; consider a longer one")

    # Fatal: port must be valid
    if not isinstance(PORT, int) or not (1 <= PORT <= 65535):
        raise ConfigError(f"server.port must be 1-65535, got {PORT}")

    # Fatal: event limits must be positive integers
    for label, val in [("events.default_limit", EVENTS_DEFAULT_LIMIT),
                       ("events.max_query_limit", EVENTS_MAX_QUERY_LIMIT),
                       ("events.subscriber_queue_size", EVENTS_SUBSCRIBER_QUEUE_SIZE)]:
        if not isinstance(val, int) or isinstance(val, bool) or val <= 0:
            raise ConfigError(f"{label} must be a positive integer, got {val}")

    if EVENTS_DEFAULT_LIMIT > EVENTS_MAX_QUERY_LIMIT:
        raise ConfigError(
            f"events.default_limit ({EVENTS_DEFAULT_LIMIT}) exceeds "
            f"events.max_query_limit ({EVENTS_MAX_QUERY_LIMIT})"
        )

    if not isinstance(EVENTS_KEEPALIVE_SECONDS, (int, float)) or EVENTS_KEEPALIVE_SECONDS <= 0:
        raise ConfigError(f"events.keepalive_seconds must be > 0, got {EVENTS_KEEPALIVE_SECONDS}")

    # Fatal: actor defaults end up on every event row
    for label, val in [("actors.system", SYSTEM_ACTOR), ("actors.human", HUMAN_ACTOR)]:
        if not isinstance(val, str) or not val.strip():
            raise ConfigError(f"{label} must be a non-empty string, got {val!r}")

    # Fatal: CORS origins must be valid URLs
    for origin in CORS_ORIGINS:
        if not isinstance(origin, str):
            raise ConfigError(f"CORS origin must be a string, got {type(origin).__name__}")
        if origin == "*":
            _logger.warning("CORS origin '*' allows all origins; not recommended for production")
        elif not origin.startswith(("http://", "https://")):
            raise ConfigError(
                f"CORS origin must start with http:// or https://, got '{origin}'"
            )


class ConfigError(Exception):
    """Raised when critical configuration is invalid."""
