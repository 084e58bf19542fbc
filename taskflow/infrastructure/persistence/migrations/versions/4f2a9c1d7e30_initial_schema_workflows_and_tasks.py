"""initial_schema_workflows_and_tasks

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-17 10:12:44.118203

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "workflow",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("steps", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("is_default", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("total_tasks", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("completed_tasks", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "average_completion_time", sa.Float(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workflow_created_by", "workflow", ["created_by"])
    op.create_index("ix_workflow_is_active", "workflow", ["is_active"])
    op.create_index("ix_workflow_is_default", "workflow", ["is_default"])
    op.create_index("ix_workflow_created_at", "workflow", ["created_at"])

    op.create_table(
        "task",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("workflow_id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("current_step", sa.Integer(), nullable=False),
        sa.Column("total_steps", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("history", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint("current_step >= 1", name="ck_task_current_step_positive"),
        sa.ForeignKeyConstraint(["workflow_id"], ["workflow.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_task_workflow_id", "task", ["workflow_id"])
    op.create_index("ix_task_client_id", "task", ["client_id"])
    op.create_index(
        "ix_task_workflow_status_step", "task", ["workflow_id", "status", "current_step"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_task_workflow_status_step", table_name="task")
    op.drop_index("ix_task_client_id", table_name="task")
    op.drop_index("ix_task_workflow_id", table_name="task")
    op.drop_table("task")
    op.drop_index("ix_workflow_created_at", table_name="workflow")
    op.drop_index("ix_workflow_is_default", table_name="workflow")
    op.drop_index("ix_workflow_is_active", table_name="workflow")
    op.drop_index("ix_workflow_created_by", table_name="workflow")
    op.drop_table("workflow")
