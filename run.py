#  Mission Control - Entry Point
#
#  Launches the FastAPI server via uvicorn.
#  Exits non-zero when configuration is missing or invalid.
#
#  Depends on: mission_control/app.py, mission_control/config.py, mission_control/logging_config.py
#  Used by:    (run directly)

import sys

import uvicorn

from mission_control.logging_config import setup_logging


def main():
    from mission_control.config import HOST, PORT, ConfigError, cfg, validate_config

    try:
        validate_config()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(
        level=cfg("server.log_level", "INFO"),
        fmt=cfg("server.log_format", "json"),
    )

    uvicorn.run(
        "mission_control.app:app",
        host=HOST,
        port=PORT,
        reload=cfg("server.reload", False),
    )


if __name__ == "__main__":
    main()
