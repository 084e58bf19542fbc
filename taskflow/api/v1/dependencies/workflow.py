"""Workflow service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.application.use_cases.workflows import WorkflowService
from taskflow.infrastructure.persistence.database import get_db, get_db_transactional
from taskflow.infrastructure.persistence.repositories import TaskRepository, WorkflowRepository


async def get_workflow_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowService:
    """WorkflowService for read operations (list, get, default)."""
    return WorkflowService(WorkflowRepository(db), TaskRepository(db))


async def get_workflow_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> WorkflowService:
    """WorkflowService for create/edit/default switch; one transaction per request."""
    return WorkflowService(WorkflowRepository(db), TaskRepository(db))
