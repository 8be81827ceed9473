#  Mission Control - Migration Runner
#
#  Programmatic Alembic runner, invoked from Database.init() at startup.
#  Databases created from the inline schema (tables present, no
#  alembic_version) are stamped before upgrading.
#
#  Depends on: mission_control/migrations/, db/models_metadata.py
#  Used by:    mission_control/db/connection.py

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from mission_control.db.models_metadata import metadata

logger = logging.getLogger("mission_control.migrate")

_MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"
_BASELINE_REVISION = "001"


def _alembic_config(url: str) -> Config:
    alembic_cfg = Config(str(_MIGRATIONS_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", url)
    alembic_cfg.set_main_option("script_location", str(_MIGRATIONS_DIR))
    return alembic_cfg


def run_migrations(db_path: str | Path) -> None:
    """Bring the database at db_path up to the head revision.

    Raises RuntimeError if any table declared in models_metadata is still
    missing afterwards.
    """
    url = f"sqlite:///{Path(db_path)}"
    alembic_cfg = _alembic_config(url)

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
        if "projects" in tables and "alembic_version" not in tables:
            # The inline schema (tests, early deployments) is always the full head schema
            revision = "head" if set(metadata.tables) <= tables else _BASELINE_REVISION
            logger.info("Unversioned mission control database, stamping at %s", revision)
            command.stamp(alembic_cfg, revision)
        elif not tables:
            logger.info("Fresh database, running all migrations")

        command.upgrade(alembic_cfg, "head")

        missing = set(metadata.tables) - set(inspect(engine).get_table_names())
        if missing:
            raise RuntimeError(f"Schema incomplete after migration, missing: {sorted(missing)}")
        logger.info("Migrations complete (head)")
    finally:
        engine.dispose()
