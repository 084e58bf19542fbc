"""Application layer: DTOs, ports, progression rules and use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, stats recorder).
"""

from taskflow.application.interfaces import (
    ITaskRepository,
    IWorkflowRepository,
    IWorkflowStatsRecorder,
)
from taskflow.application.use_cases.tasks import TaskService
from taskflow.application.use_cases.workflows import WorkflowService

__all__ = [
    "ITaskRepository",
    "IWorkflowRepository",
    "IWorkflowStatsRecorder",
    "TaskService",
    "WorkflowService",
]
