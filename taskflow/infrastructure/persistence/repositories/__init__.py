"""Repository implementations of the application ports."""

from taskflow.infrastructure.persistence.repositories.base import BaseRepository
from taskflow.infrastructure.persistence.repositories.task_repo import TaskRepository
from taskflow.infrastructure.persistence.repositories.workflow_repo import WorkflowRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
    "WorkflowRepository",
]
