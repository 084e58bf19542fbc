"""Task progression API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taskflow.domain.enums import StepAction, TaskHistoryAction, TaskStatus


class TaskCreateRequest(BaseModel):
    """Start a task; omit workflow_id to use the default workflow."""

    title: str
    client_id: str | None = None
    workflow_id: str | None = None


class TaskAdvanceRequest(BaseModel):
    """Perform an action on the task's current step."""

    action: StepAction
    comment: str | None = Field(default=None, max_length=500)
    expected_version: int | None = Field(default=None, ge=1)


class TaskRevertRequest(BaseModel):
    """Move a task back (reopens completed tasks)."""

    steps_back: int = Field(default=1, ge=1)
    reason: str | None = Field(default=None, max_length=500)
    expected_version: int | None = Field(default=None, ge=1)


class TaskHistoryEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    action: TaskHistoryAction
    description: str
    changed_by: str | None
    step_from: int | None
    step_to: int | None
    timestamp: datetime


class TaskResponse(BaseModel):
    """Task progression state."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    workflow_id: str
    client_id: str | None
    status: TaskStatus
    current_step: int
    total_steps: int
    started_at: datetime | None
    completed_at: datetime | None
    history: list[TaskHistoryEntryResponse]
    created_by: str | None
    version: int
    created_at: datetime | None
    updated_at: datetime | None
