"""Task progression ORM model. Table: task."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from taskflow.domain.enums import TaskStatus
from taskflow.infrastructure.persistence.database import Base
from taskflow.infrastructure.persistence.models.mixins import VersionedModel


class Task(VersionedModel, Base):
    """Task position within its workflow plus append-only progression history."""

    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    workflow_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    client_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskStatus.ACTIVE.value
    )
    current_step: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_steps: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("current_step >= 1", name="ck_task_current_step_positive"),
        Index("ix_task_workflow_status_step", "workflow_id", "status", "current_step"),
    )
