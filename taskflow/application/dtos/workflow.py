"""DTOs for workflow definitions and step edits (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field

from taskflow.domain.entities.workflow import (
    DEFAULT_STEP_COLOR,
    DEFAULT_STEP_ICON,
    StepSettings,
    WorkflowStep,
)


@dataclass(frozen=True)
class StepInput:
    """Caller-supplied step fields. ``order`` is never taken from the caller."""

    name: str
    description: str | None = None
    color: str = DEFAULT_STEP_COLOR
    icon: str = DEFAULT_STEP_ICON
    settings: StepSettings = field(default_factory=StepSettings)

    def to_step(self) -> WorkflowStep:
        """Build a validated step with a fresh id (raises InvalidStepError)."""
        return WorkflowStep(
            name=self.name,
            description=self.description,
            color=self.color,
            icon=self.icon,
            settings=self.settings,
        )


@dataclass(frozen=True)
class WorkflowCreate:
    """Input for creating a workflow definition."""

    name: str
    steps: list[StepInput]
    description: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class WorkflowListQuery:
    """Filters for listing workflows."""

    include_inactive: bool = False
    search: str | None = None
    skip: int = 0
    limit: int = 100
