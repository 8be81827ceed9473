#  Mission Control - Alembic Environment
#
#  Configures Alembic with the project's SQLAlchemy metadata.
#  Uses a SYNC SQLAlchemy engine; runs in a worker thread at startup.
#
#  Depends on: mission_control/db/models_metadata.py
#  Used by:    alembic CLI, mission_control/db/migrate.py

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from mission_control.db.models_metadata import metadata as target_metadata

config = context.config

# disable_existing_loggers=False keeps the mission_control handlers alive
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def run_migrations_offline() -> None:
    """Emit SQL for the migrations without a live connection."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Connect to the configured database and apply migrations."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        # batch mode: SQLite can't ALTER constraints in place
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
