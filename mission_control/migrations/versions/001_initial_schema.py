"""Initial schema: projects, agents, missions, tasks, artifacts, approvals, event log.

Revision ID: 001
Revises: None
Create Date: 2026-09-02
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("createdAt", sa.Text, nullable=False),
        sa.Column("updatedAt", sa.Text, nullable=False),
    )

    op.create_table(
        "missions",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("projectId", sa.Text, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("objective", sa.Text),
        sa.Column("status", sa.Text, nullable=False),
        sa.Column("risk", sa.Text, nullable=False),
        sa.Column("costUsd", sa.Float),
        sa.Column("createdAt", sa.Text, nullable=False),
        sa.Column("updatedAt", sa.Text, nullable=False),
    )

    op.create_table(
        "agents",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("role", sa.Text, nullable=False),
        sa.Column("state", sa.Text, nullable=False),
        sa.Column("workingOnMissionId", sa.Text, sa.ForeignKey("missions.id", ondelete="SET NULL")),
        sa.Column("createdAt", sa.Text, nullable=False),
        sa.Column("updatedAt", sa.Text, nullable=False),
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("missionId", sa.Text, sa.ForeignKey("missions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("status", sa.Text, nullable=False),
        sa.Column("critical", sa.Integer, nullable=False, server_default="0"),
        sa.Column("createdAt", sa.Text, nullable=False),
        sa.Column("updatedAt", sa.Text, nullable=False),
    )

    op.create_table(
        "artifacts",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("missionId", sa.Text, sa.ForeignKey("missions.id", ondelete="SET NULL")),
        sa.Column("taskId", sa.Text, sa.ForeignKey("tasks.id", ondelete="SET NULL")),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("kind", sa.Text, nullable=False),
        sa.Column("ref", sa.Text, nullable=False),
        sa.Column("createdAt", sa.Text, nullable=False),
        sa.Column("updatedAt", sa.Text, nullable=False),
    )

    op.create_table(
        "approvals",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("missionId", sa.Text, sa.ForeignKey("missions.id", ondelete="SET NULL")),
        sa.Column("taskId", sa.Text, sa.ForeignKey("tasks.id", ondelete="SET NULL")),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("state", sa.Text, nullable=False),
        sa.Column("requestedBy", sa.Text, nullable=False),
        sa.Column("requestedAt", sa.Text, nullable=False),
        sa.Column("approvedAt", sa.Text),
        sa.Column("createdAt", sa.Text, nullable=False),
        sa.Column("updatedAt", sa.Text, nullable=False),
    )

    # Events carry plain id columns: they must survive entity deletion
    op.create_table(
        "event_logs",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("at", sa.Text, nullable=False),
        sa.Column("actor", sa.Text, nullable=False),
        sa.Column("action", sa.Text, nullable=False),
        sa.Column("result", sa.Text, nullable=False),
        sa.Column("message", sa.Text),
        sa.Column("projectId", sa.Text),
        sa.Column("missionId", sa.Text),
        sa.Column("taskId", sa.Text),
    )

    op.create_index("idx_missions_project", "missions", ["projectId"])
    op.create_index("idx_tasks_mission", "tasks", ["missionId"])
    op.create_index("idx_events_at", "event_logs", ["at"])


def downgrade() -> None:
    op.drop_index("idx_events_at")
    op.drop_index("idx_tasks_mission")
    op.drop_index("idx_missions_project")
    op.drop_table("event_logs")
    op.drop_table("approvals")
    op.drop_table("artifacts")
    op.drop_table("tasks")
    op.drop_table("agents")
    op.drop_table("missions")
    op.drop_table("projects")
