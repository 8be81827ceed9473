#  Mission Control - SQLAlchemy Table Metadata
#
#  Declarative Table definitions for Alembic autogenerate.
#  These mirror the SQLite schema but are NOT used at runtime:
#  the app still uses raw SQL via aiosqlite.
#
#  Depends on: (none)
#  Used by:    migrations/env.py (Alembic autogenerate), db/migrate.py

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

projects = Table(
    "projects",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("createdAt", Text, nullable=False),
    Column("updatedAt", Text, nullable=False),
)

missions = Table(
    "missions",
    metadata,
    Column("id", Text, primary_key=True),
    Column("projectId", Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
    Column("title", Text, nullable=False),
    Column("objective", Text),
    Column("status", Text, nullable=False),
    Column("risk", Text, nullable=False),
    Column("costUsd", Float),
    Column("createdAt", Text, nullable=False),
    Column("updatedAt", Text, nullable=False),
)

tasks = Table(
    "tasks",
    metadata,
    Column("id", Text, primary_key=True),
    Column("missionId", Text, ForeignKey("missions.id", ondelete="CASCADE"), nullable=False),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("status", Text, nullable=False),
    Column("critical", Integer, nullable=False, server_default="0"),
    Column("createdAt", Text, nullable=False),
    Column("updatedAt", Text, nullable=False),
)

agents = Table(
    "agents",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("role", Text, nullable=False),
    Column("state", Text, nullable=False),
    Column("workingOnMissionId", Text, ForeignKey("missions.id", ondelete="SET NULL")),
    Column("createdAt", Text, nullable=False),
    Column("updatedAt", Text, nullable=False),
)

artifacts = Table(
    "artifacts",
    metadata,
    Column("id", Text, primary_key=True),
    Column("missionId", Text, ForeignKey("missions.id", ondelete="SET NULL")),
    Column("taskId", Text, ForeignKey("tasks.id", ondelete="SET NULL")),
    Column("title", Text, nullable=False),
    Column("kind", Text, nullable=False),
    Column("ref", Text, nullable=False),
    Column("createdAt", Text, nullable=False),
    Column("updatedAt", Text, nullable=False),
)

links = Table(
    "links",
    metadata,
    Column("id", Text, primary_key=True),
    Column("missionId", Text, ForeignKey("missions.id", ondelete="SET NULL")),
    Column("taskId", Text, ForeignKey("tasks.id", ondelete="SET NULL")),
    Column("title", Text, nullable=False),
    Column("url", Text, nullable=False),
    Column("createdAt", Text, nullable=False),
    Column("updatedAt", Text, nullable=False),
)

approvals = Table(
    "approvals",
    metadata,
    Column("id", Text, primary_key=True),
    Column("missionId", Text, ForeignKey("missions.id", ondelete="SET NULL")),
    Column("taskId", Text, ForeignKey("tasks.id", ondelete="SET NULL")),
    Column("title", Text, nullable=False),
    Column("state", Text, nullable=False),
    Column("requestedBy", Text, nullable=False),
    Column("requestedAt", Text, nullable=False),
    Column("approvedAt", Text),
    Column("createdAt", Text, nullable=False),
    Column("updatedAt", Text, nullable=False),
)

event_logs = Table(
    "event_logs",
    metadata,
    Column("id", Text, primary_key=True),
    Column("at", Text, nullable=False),
    Column("actor", Text, nullable=False),
    Column("action", Text, nullable=False),
    Column("result", Text, nullable=False),
    Column("message", Text),
    Column("projectId", Text),
    Column("missionId", Text),
    Column("taskId", Text),
)

# Indexes
Index("idx_missions_project", missions.c.projectId)
Index("idx_tasks_mission", tasks.c.missionId)
Index("idx_approvals_mission", approvals.c.missionId)
Index("idx_approvals_task", approvals.c.taskId)
Index("idx_artifacts_mission", artifacts.c.missionId)
Index("idx_links_mission", links.c.missionId)
Index("idx_events_at", event_logs.c.at)
