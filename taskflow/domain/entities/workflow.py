"""Workflow domain entity.

A workflow is an ordered pipeline of named steps that a task moves through.
Each step carries visibility and approval settings. Step ``order`` values are
always the contiguous 1-based positions of the steps; every mutation here
renumbers before returning.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any

from taskflow.domain.exceptions import (
    InvalidPermutationError,
    InvalidStepError,
    LastStepError,
    ResourceNotFoundException,
    ValidationException,
)
from taskflow.domain.value_objects.core import HexColor
from taskflow.shared.utils.generators import generate_cuid

DEFAULT_STEP_COLOR = "#3B82F6"
DEFAULT_STEP_ICON = "circle"
WORKFLOW_NAME_MAX_LENGTH = 100
WORKFLOW_DESCRIPTION_MAX_LENGTH = 500
STEP_NAME_MAX_LENGTH = 50
STEP_DESCRIPTION_MAX_LENGTH = 200


@dataclass(frozen=True)
class StepSettings:
    """Per-step visibility and approval flags."""

    allow_client_access: bool = False
    requires_approval: bool = False
    allow_multiple_files: bool = True
    is_client_approval_step: bool = False

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> StepSettings:
        data = data or {}
        return cls(
            allow_client_access=bool(data.get("allow_client_access", False)),
            requires_approval=bool(data.get("requires_approval", False)),
            allow_multiple_files=bool(data.get("allow_multiple_files", True)),
            is_client_approval_step=bool(data.get("is_client_approval_step", False)),
        )

    def merged(self, changes: dict[str, Any]) -> StepSettings:
        """Return a copy with only the flags in changes replaced."""
        unknown = set(changes) - set(self.to_dict())
        if unknown:
            raise ValidationException(
                "Unsupported step settings", field="settings", value=sorted(unknown)
            )
        return replace(self, **{key: bool(value) for key, value in changes.items()})


@dataclass(frozen=True)
class WorkflowStep:
    """One stage of a workflow. Validation runs on construction.

    Steps are immutable; edits go through ``dataclasses.replace`` so the
    rules below are re-checked for every new version of a step.
    """

    name: str
    order: int = 0
    id: str = field(default_factory=generate_cuid)
    description: str | None = None
    color: str = DEFAULT_STEP_COLOR
    icon: str = DEFAULT_STEP_ICON
    settings: StepSettings = field(default_factory=StepSettings)

    def __post_init__(self) -> None:
        if isinstance(self.name, str):
            object.__setattr__(self, "name", self.name.strip())
        self.validate()

    def validate(self) -> None:
        """Validate step rules. Raises InvalidStepError if invalid."""
        if not isinstance(self.name, str) or not self.name:
            raise InvalidStepError("Step name is required", field="name", value=self.name)
        if len(self.name) > STEP_NAME_MAX_LENGTH:
            raise InvalidStepError(
                f"Step name must not exceed {STEP_NAME_MAX_LENGTH} characters",
                field="name",
                value=self.name,
            )
        if self.description is not None and len(self.description) > STEP_DESCRIPTION_MAX_LENGTH:
            raise InvalidStepError(
                f"Step description must not exceed {STEP_DESCRIPTION_MAX_LENGTH} characters",
                field="description",
            )
        if self.order < 0:
            raise InvalidStepError("Step order must be positive", field="order", value=self.order)
        try:
            HexColor(self.color)
        except ValueError as e:
            raise InvalidStepError(str(e), field="color", value=self.color) from e
        if not isinstance(self.icon, str) or not self.icon.strip():
            raise InvalidStepError("Step icon is required", field="icon", value=self.icon)
        if self.settings.is_client_approval_step and not self.settings.allow_client_access:
            raise InvalidStepError(
                "A client approval step must allow client access",
                field="settings.allow_client_access",
                value=False,
            )

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted document shape of this step."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "order": self.order,
            "color": self.color,
            "icon": self.icon,
            "settings": self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkflowStep:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description"),
            order=int(data.get("order", 0)),
            color=data.get("color") or DEFAULT_STEP_COLOR,
            icon=data.get("icon") or DEFAULT_STEP_ICON,
            settings=StepSettings.from_dict(data.get("settings")),
        )


@dataclass(frozen=True)
class WorkflowStats:
    """Denormalized usage counters. Written only by the stats recorder."""

    total_tasks: int = 0
    completed_tasks: int = 0
    average_completion_time: float = 0.0  # hours


def _renumbered(steps: list[WorkflowStep]) -> list[WorkflowStep]:
    return [
        step if step.order == position else replace(step, order=position)
        for position, step in enumerate(steps, start=1)
    ]


@dataclass
class WorkflowEntity:
    """Domain entity for a workflow definition (ordered steps + flags).

    ``is_default`` is read-only from the domain's point of view: only the
    repository's ``set_default`` writes it, in one statement across the
    collection. ``version`` is the optimistic-lock counter of the stored row.
    """

    id: str
    name: str
    steps: list[WorkflowStep]
    description: str | None = None
    is_active: bool = True
    is_default: bool = False
    stats: WorkflowStats = field(default_factory=WorkflowStats)
    created_by: str | None = None
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.name, str):
            self.name = self.name.strip()
        self.validate()

    @classmethod
    def new(
        cls,
        name: str,
        description: str | None,
        steps: list[WorkflowStep],
        *,
        created_by: str | None = None,
        is_active: bool = True,
    ) -> WorkflowEntity:
        """Build a new workflow; step orders are reassigned from their positions."""
        return cls(
            id=generate_cuid(),
            name=name,
            description=description,
            steps=_renumbered(list(steps)),
            is_active=is_active,
            is_default=False,
            stats=WorkflowStats(),
            created_by=created_by,
        )

    def validate(self) -> None:
        """Validate workflow rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Workflow ID is required", field="id")
        if not isinstance(self.name, str) or not self.name:
            raise ValidationException("Workflow name is required", field="name", value=self.name)
        if len(self.name) > WORKFLOW_NAME_MAX_LENGTH:
            raise ValidationException(
                f"Workflow name must not exceed {WORKFLOW_NAME_MAX_LENGTH} characters",
                field="name",
                value=self.name,
            )
        if (
            self.description is not None
            and len(self.description) > WORKFLOW_DESCRIPTION_MAX_LENGTH
        ):
            raise ValidationException(
                f"Workflow description must not exceed {WORKFLOW_DESCRIPTION_MAX_LENGTH} characters",
                field="description",
            )
        if not self.steps:
            raise ValidationException("A workflow needs at least one step", field="steps")
        orders = [step.order for step in self.steps]
        if orders != list(range(1, len(self.steps) + 1)):
            raise ValidationException(
                "Step orders must be sequential starting at 1",
                field="steps.order",
                value=orders,
            )
        duplicated = [sid for sid, n in Counter(s.id for s in self.steps).items() if n > 1]
        if duplicated:
            raise ValidationException(
                "Step ids must be unique within a workflow",
                field="steps.id",
                value=duplicated,
            )

    # ---- Queries ----

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def ordered_steps(self) -> list[WorkflowStep]:
        """Return a copy of the steps sorted by order."""
        return sorted(self.steps, key=lambda s: s.order)

    @property
    def step_ids(self) -> list[str]:
        return [step.id for step in self.steps]

    def step_by_order(self, order: int) -> WorkflowStep | None:
        if 1 <= order <= len(self.steps):
            return self.steps[order - 1]
        return None

    def step_by_id(self, step_id: str) -> WorkflowStep | None:
        return next((s for s in self.steps if s.id == step_id), None)

    def require_step(self, order: int) -> WorkflowStep:
        """Return the step at order; raise ResourceNotFoundException if absent."""
        step = self.step_by_order(order)
        if step is None:
            raise ResourceNotFoundException("step", f"{self.id}#{order}")
        return step

    def next_step(self, order: int) -> WorkflowStep | None:
        return self.step_by_order(order + 1)

    def previous_step(self, order: int) -> WorkflowStep | None:
        return self.step_by_order(order - 1) if order > 1 else None

    def is_last_step(self, order: int) -> bool:
        return order == len(self.steps)

    def can_be_assigned(self) -> bool:
        """Return whether new tasks may use this workflow."""
        return self.is_active

    # ---- Mutations ----

    def rename(self, name: str) -> None:
        """Change the name; re-runs validation (leaves entity unchanged on failure)."""
        previous = self.name
        self.name = name.strip() if isinstance(name, str) else name
        try:
            self.validate()
        except ValidationException:
            self.name = previous
            raise

    def change_description(self, description: str | None) -> None:
        previous = self.description
        self.description = description
        try:
            self.validate()
        except ValidationException:
            self.description = previous
            raise

    def insert_step(self, position: int, step: WorkflowStep) -> int:
        """Insert step at 1-based position, clamped to [1, len + 1].

        Returns:
            The position the step ended up at (its new order).
        """
        if self.step_by_id(step.id) is not None:
            raise InvalidStepError("Step id already present in workflow", field="id", value=step.id)
        position = max(1, min(position, len(self.steps) + 1))
        steps = list(self.steps)
        steps.insert(position - 1, step)
        self.steps = _renumbered(steps)
        return position

    def remove_step(self, order: int) -> WorkflowStep:
        """Remove the step at order and renumber the rest.

        Raises:
            ResourceNotFoundException: If no step has this order.
            LastStepError: If it is the only step (workflow unchanged).
        """
        step = self.require_step(order)
        if len(self.steps) == 1:
            raise LastStepError(self.id, order)
        self.steps = _renumbered([s for s in self.steps if s.id != step.id])
        return step

    def reorder_steps(self, step_ids: list[str]) -> dict[int, int]:
        """Reorder steps to follow step_ids (a permutation of the current ids).

        Returns:
            Mapping of previous order to new order for every step.

        Raises:
            InvalidPermutationError: If step_ids is not a permutation of the step set.
        """
        current = self.step_ids
        counts = Counter(step_ids)
        duplicates = sorted(sid for sid, n in counts.items() if n > 1)
        unknown = sorted(set(step_ids) - set(current))
        missing = [sid for sid in current if sid not in counts]
        if duplicates or unknown or missing:
            raise InvalidPermutationError(
                self.id, missing=missing, unknown=unknown, duplicates=duplicates
            )
        by_id = {step.id: step for step in self.steps}
        previous_order = {step.id: step.order for step in self.steps}
        self.steps = _renumbered([by_id[sid] for sid in step_ids])
        return {previous_order[step.id]: step.order for step in self.steps}

    def update_step(self, order: int, **changes: Any) -> WorkflowStep:
        """Apply field changes to one step; the new step is validated before it is stored.

        Accepted keys: name, description, color, icon, settings. A StepSettings
        replaces the step's settings; a dict changes only the flags it names.
        """
        allowed = {"name", "description", "color", "icon", "settings"}
        unexpected = set(changes) - allowed
        if unexpected:
            raise ValidationException(
                "Unsupported step fields", field="step", value=sorted(unexpected)
            )
        step = self.require_step(order)
        if isinstance(changes.get("settings"), dict):
            changes["settings"] = step.settings.merged(changes["settings"])
        updated = replace(step, **changes)
        self.steps = [updated if s.id == step.id else s for s in self.steps]
        return updated
