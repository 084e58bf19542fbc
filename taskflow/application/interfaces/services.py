"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from taskflow.application.dtos.task import TaskCompletedEvent, TaskStartedEvent


# Workflow stats recorder interface
class IWorkflowStatsRecorder(Protocol):
    """Protocol for the collaborator that owns the denormalized workflow stats."""

    async def task_started(self, event: TaskStartedEvent) -> None:
        """Count a new task against its workflow."""

    async def task_completed(self, event: TaskCompletedEvent) -> None:
        """Count a completion and fold its duration into the running average."""
