"""DTOs for task progression and stats events (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TaskCreate:
    """Input for starting a task; workflow_id None means the default workflow."""

    title: str
    client_id: str | None = None
    workflow_id: str | None = None


@dataclass(frozen=True)
class TaskStartedEvent:
    """Published when a task is started on a workflow."""

    workflow_id: str
    task_id: str


@dataclass(frozen=True)
class TaskCompletedEvent:
    """Published when a task leaves the last step of its workflow."""

    workflow_id: str
    task_id: str
    started_at: datetime | None
    completed_at: datetime
