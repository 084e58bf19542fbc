"""Application DTOs (no ORM dependency)."""

from taskflow.application.dtos.identity import CallerIdentity
from taskflow.application.dtos.task import (
    TaskCompletedEvent,
    TaskCreate,
    TaskStartedEvent,
)
from taskflow.application.dtos.workflow import StepInput, WorkflowCreate, WorkflowListQuery

__all__ = [
    "CallerIdentity",
    "StepInput",
    "TaskCompletedEvent",
    "TaskCreate",
    "TaskStartedEvent",
    "WorkflowCreate",
    "WorkflowListQuery",
]
