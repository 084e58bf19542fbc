"""Workflow definition ORM model. Steps are stored as a JSON document list."""

from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskflow.infrastructure.persistence.database import Base
from taskflow.infrastructure.persistence.models.mixins import VersionedModel


class Workflow(VersionedModel, Base):
    """Workflow definition. Table: workflow. Ordered steps JSON + default/active flags + stats."""

    __tablename__ = "workflow"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    steps: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    created_by: Mapped[str | None] = mapped_column(String, nullable=True, index=True)

    # Denormalized usage stats; written only by WorkflowStatsRecorder.
    total_tasks: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    completed_tasks: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    average_completion_time: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0, server_default=sa.text("0")
    )

    __table_args__ = (
        Index("ix_workflow_is_active", "is_active"),
        Index("ix_workflow_is_default", "is_default"),
        Index("ix_workflow_created_at", "created_at"),
    )
