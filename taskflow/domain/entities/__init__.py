"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from taskflow.domain.entities.task import TaskEntity, TaskHistoryEntry
from taskflow.domain.entities.workflow import (
    StepSettings,
    WorkflowEntity,
    WorkflowStats,
    WorkflowStep,
)

__all__ = [
    "StepSettings",
    "TaskEntity",
    "TaskHistoryEntry",
    "WorkflowEntity",
    "WorkflowStats",
    "WorkflowStep",
]
