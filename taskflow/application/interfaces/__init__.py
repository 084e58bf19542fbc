"""Application ports (repository and service protocols)."""

from taskflow.application.interfaces.repositories import ITaskRepository, IWorkflowRepository
from taskflow.application.interfaces.services import IWorkflowStatsRecorder

__all__ = [
    "ITaskRepository",
    "IWorkflowRepository",
    "IWorkflowStatsRecorder",
]
