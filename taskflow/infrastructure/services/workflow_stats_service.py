"""Workflow stats recorder (implements IWorkflowStatsRecorder).

Owns the denormalized counters on the workflow row. Each event is folded in
with one atomic UPDATE so concurrent completions never lose an increment.
Stats writes do not bump the definition version.
"""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.application.dtos.task import TaskCompletedEvent, TaskStartedEvent
from taskflow.infrastructure.persistence.models.workflow import Workflow
from taskflow.shared.telemetry.logging import get_logger
from taskflow.shared.utils.datetime import hours_between

logger = get_logger(__name__)


class WorkflowStatsRecorder:
    """Consumes task lifecycle events and updates workflow stats."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def task_started(self, event: TaskStartedEvent) -> None:
        await self.db.execute(
            update(Workflow)
            .where(Workflow.id == event.workflow_id)
            .values(total_tasks=Workflow.total_tasks + 1)
            .execution_options(synchronize_session=False)
        )

    async def task_completed(self, event: TaskCompletedEvent) -> None:
        """Increment completed_tasks and update the running average (hours)."""
        hours = (
            hours_between(event.started_at, event.completed_at) if event.started_at else 0.0
        )
        result = await self.db.execute(
            update(Workflow)
            .where(Workflow.id == event.workflow_id)
            .values(
                completed_tasks=Workflow.completed_tasks + 1,
                average_completion_time=(
                    Workflow.average_completion_time * Workflow.completed_tasks + hours
                )
                / (Workflow.completed_tasks + 1),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.warning(
                "Stats not recorded: workflow %s not found (task %s)",
                event.workflow_id,
                event.task_id,
            )
            return
        logger.debug(
            "Completion recorded: workflow=%s task=%s hours=%.2f",
            event.workflow_id,
            event.task_id,
            hours,
        )
