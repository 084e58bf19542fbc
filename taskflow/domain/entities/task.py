"""Task progression entity.

Holds the part of a task that the workflow engine owns: which workflow it
follows, its current step position, status and the progression history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from taskflow.domain.enums import StepAction, TaskHistoryAction, TaskStatus
from taskflow.domain.exceptions import ValidationException
from taskflow.domain.value_objects.core import StepTransition
from taskflow.shared.utils.datetime import utc_now
from taskflow.shared.utils.generators import generate_cuid

TASK_TITLE_MAX_LENGTH = 200


@dataclass(frozen=True)
class TaskHistoryEntry:
    """One entry of a task's progression history (append-only)."""

    action: TaskHistoryAction
    description: str
    changed_by: str | None
    step_from: int | None = None
    step_to: int | None = None
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "description": self.description,
            "changed_by": self.changed_by,
            "step_from": self.step_from,
            "step_to": self.step_to,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskHistoryEntry:
        return cls(
            action=TaskHistoryAction(data["action"]),
            description=data.get("description") or "",
            changed_by=data.get("changed_by"),
            step_from=data.get("step_from"),
            step_to=data.get("step_to"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass
class TaskEntity:
    """Domain entity for a task moving through a workflow.

    A completed task keeps ``current_step`` at the last step it finished,
    mirroring what the client-facing UI shows for finished work.
    """

    id: str
    title: str
    workflow_id: str
    current_step: int
    total_steps: int
    client_id: str | None = None
    status: TaskStatus = TaskStatus.ACTIVE
    started_at: datetime | None = None
    completed_at: datetime | None = None
    history: list[TaskHistoryEntry] = field(default_factory=list)
    created_by: str | None = None
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.title, str):
            self.title = self.title.strip()
        self.validate()

    @classmethod
    def start(
        cls,
        title: str,
        workflow_id: str,
        total_steps: int,
        *,
        client_id: str | None = None,
        created_by: str | None = None,
    ) -> TaskEntity:
        """Create a task positioned at step 1 with a 'created' history entry."""
        now = utc_now()
        return cls(
            id=generate_cuid(),
            title=title,
            workflow_id=workflow_id,
            current_step=1,
            total_steps=total_steps,
            client_id=client_id,
            status=TaskStatus.ACTIVE,
            started_at=now,
            history=[
                TaskHistoryEntry(
                    action=TaskHistoryAction.CREATED,
                    description="Task created",
                    changed_by=created_by,
                    step_to=1,
                    timestamp=now,
                )
            ],
            created_by=created_by,
        )

    def validate(self) -> None:
        if not self.id:
            raise ValidationException("Task ID is required", field="id")
        if not isinstance(self.title, str) or not self.title:
            raise ValidationException("Task title is required", field="title", value=self.title)
        if len(self.title) > TASK_TITLE_MAX_LENGTH:
            raise ValidationException(
                f"Task title must not exceed {TASK_TITLE_MAX_LENGTH} characters",
                field="title",
            )
        if not self.workflow_id:
            raise ValidationException("Task workflow is required", field="workflow_id")
        if self.total_steps < 1:
            raise ValidationException(
                "Task total steps must be at least 1", field="total_steps", value=self.total_steps
            )
        if not 1 <= self.current_step <= self.total_steps:
            raise ValidationException(
                "Task current step is outside the workflow",
                field="current_step",
                value=self.current_step,
            )

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_live(self) -> bool:
        return self.status in TaskStatus.live()

    def apply_transition(
        self,
        transition: StepTransition,
        *,
        changed_by: str | None,
        description: str | None = None,
    ) -> TaskHistoryEntry:
        """Move the task as described by transition and record it in history.

        Returns:
            The appended history entry.
        """
        now = utc_now()
        if transition.completed:
            self.status = TaskStatus.COMPLETED
            self.completed_at = now
            action = TaskHistoryAction.COMPLETED
            text = description or "Task completed"
        else:
            self.current_step = transition.step_to
            if transition.reopened:
                self.status = TaskStatus.ACTIVE
                self.completed_at = None
                action = TaskHistoryAction.REOPENED
                text = description or f"Task reopened at step {transition.step_to}"
            elif transition.is_revert:
                action = TaskHistoryAction.STEP_REVERTED
                text = description or f"Moved back to step {transition.step_to}"
            elif transition.action == StepAction.APPROVE:
                action = TaskHistoryAction.APPROVED
                text = description or f"Step {transition.step_from} approved"
            else:
                action = TaskHistoryAction.STEP_ADVANCED
                text = description or f"Advanced to step {transition.step_to}"
        entry = TaskHistoryEntry(
            action=action,
            description=text,
            changed_by=changed_by,
            step_from=transition.step_from,
            step_to=transition.step_to,
            timestamp=now,
        )
        self.history.append(entry)
        return entry
