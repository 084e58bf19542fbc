"""Workflow API schemas.

Field rules (lengths, color pattern, client-approval flags) are enforced by
the domain so that violations surface as INVALID_STEP / VALIDATION_ERROR
rather than generic 422s.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from taskflow.application.dtos.workflow import StepInput
from taskflow.domain.entities.workflow import (
    DEFAULT_STEP_COLOR,
    DEFAULT_STEP_ICON,
    StepSettings,
)


class StepSettingsSchema(BaseModel):
    """Step visibility and approval flags."""

    model_config = ConfigDict(from_attributes=True)

    allow_client_access: bool = False
    requires_approval: bool = False
    allow_multiple_files: bool = True
    is_client_approval_step: bool = False

    def to_domain(self) -> StepSettings:
        return StepSettings(**self.model_dump())


class StepCreateRequest(BaseModel):
    """One step in a create/insert request. Any ``order`` sent is ignored."""

    name: str
    description: str | None = None
    color: str = DEFAULT_STEP_COLOR
    icon: str = DEFAULT_STEP_ICON
    settings: StepSettingsSchema = Field(default_factory=StepSettingsSchema)
    order: int | None = Field(default=None, description="Ignored; order follows list position")

    def to_input(self) -> StepInput:
        return StepInput(
            name=self.name,
            description=self.description,
            color=self.color,
            icon=self.icon,
            settings=self.settings.to_domain(),
        )


class WorkflowCreateRequest(BaseModel):
    """Request body for creating a workflow."""

    name: str
    description: str | None = None
    steps: list[StepCreateRequest]
    is_active: bool = True


class WorkflowUpdateRequest(BaseModel):
    """Request body for renaming a workflow or changing its description."""

    name: str | None = None
    description: str | None = None
    expected_version: int | None = Field(default=None, ge=1)


class StepInsertRequest(StepCreateRequest):
    """Insert a step; position is 1-based and clamped. Omit it to append."""

    position: int | None = None
    expected_version: int | None = Field(default=None, ge=1)


class StepUpdateRequest(BaseModel):
    """Partial step edit. Only fields present in the body are changed."""

    name: str | None = None
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    settings: StepSettingsSchema | None = None
    expected_version: int | None = Field(default=None, ge=1)

    def changes(self) -> dict[str, Any]:
        """Return the fields the caller actually sent.

        ``settings`` is the dict of flags present in the body, merged over the
        step's current settings by the workflow.
        """
        sent = self.model_dump(exclude_unset=True, exclude={"expected_version", "settings"})
        if self.settings is not None:
            flags = self.settings.model_dump(exclude_unset=True)
            if flags:
                sent["settings"] = flags
        return sent


class StepReorderRequest(BaseModel):
    """New step sequence as a permutation of the workflow's step ids."""

    step_ids: list[str]
    expected_version: int | None = Field(default=None, ge=1)


class StepResponse(BaseModel):
    """Workflow step response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    order: int
    color: str
    icon: str
    settings: StepSettingsSchema


class WorkflowStatsResponse(BaseModel):
    """Denormalized workflow usage stats."""

    model_config = ConfigDict(from_attributes=True)

    total_tasks: int
    completed_tasks: int
    average_completion_time: float = Field(..., description="Average completion time in hours")


class WorkflowResponse(BaseModel):
    """Workflow response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    steps: list[StepResponse]
    step_count: int
    is_active: bool
    is_default: bool
    stats: WorkflowStatsResponse
    created_by: str | None
    version: int
    created_at: datetime | None
    updated_at: datetime | None
