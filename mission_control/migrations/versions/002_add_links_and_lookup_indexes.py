"""Add links table and lookup indexes for approvals and artifacts.

Revision ID: 002
Revises: 001
Create Date: 2026-09-20
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "links",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("missionId", sa.Text, sa.ForeignKey("missions.id", ondelete="SET NULL")),
        sa.Column("taskId", sa.Text, sa.ForeignKey("tasks.id", ondelete="SET NULL")),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("createdAt", sa.Text, nullable=False),
        sa.Column("updatedAt", sa.Text, nullable=False),
    )

    # OK EXECUTAR and the approvals tab both look approvals up by mission
    op.create_index("idx_approvals_mission", "approvals", ["missionId"])
    op.create_index("idx_approvals_task", "approvals", ["taskId"])
    op.create_index("idx_artifacts_mission", "artifacts", ["missionId"])
    op.create_index("idx_links_mission", "links", ["missionId"])


def downgrade() -> None:
    op.drop_index("idx_links_mission")
    op.drop_index("idx_artifacts_mission")
    op.drop_index("idx_approvals_task")
    op.drop_index("idx_approvals_mission")
    op.drop_table("links")
