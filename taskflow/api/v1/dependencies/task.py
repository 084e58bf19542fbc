"""Task service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.application.use_cases.tasks import TaskService
from taskflow.infrastructure.persistence.database import get_db, get_db_transactional
from taskflow.infrastructure.persistence.repositories import TaskRepository, WorkflowRepository
from taskflow.infrastructure.services import WorkflowStatsRecorder


async def get_task_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskService:
    """TaskService for reads."""
    return TaskService(TaskRepository(db), WorkflowRepository(db), WorkflowStatsRecorder(db))


async def get_task_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TaskService:
    """TaskService for start/advance/revert; progression and stats commit together."""
    return TaskService(TaskRepository(db), WorkflowRepository(db), WorkflowStatsRecorder(db))
