"""Pydantic request/response schemas for the HTTP API."""

from taskflow.schemas.health import HealthResponse, ReadinessResponse
from taskflow.schemas.task import (
    TaskAdvanceRequest,
    TaskCreateRequest,
    TaskResponse,
    TaskRevertRequest,
)
from taskflow.schemas.workflow import (
    StepInsertRequest,
    StepReorderRequest,
    StepUpdateRequest,
    WorkflowCreateRequest,
    WorkflowResponse,
    WorkflowUpdateRequest,
)

__all__ = [
    "HealthResponse",
    "ReadinessResponse",
    "StepInsertRequest",
    "StepReorderRequest",
    "StepUpdateRequest",
    "TaskAdvanceRequest",
    "TaskCreateRequest",
    "TaskResponse",
    "TaskRevertRequest",
    "WorkflowCreateRequest",
    "WorkflowResponse",
    "WorkflowUpdateRequest",
]
