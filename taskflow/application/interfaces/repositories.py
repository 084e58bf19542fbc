"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from taskflow.application.dtos.workflow import WorkflowListQuery
    from taskflow.domain.entities.task import TaskEntity
    from taskflow.domain.entities.workflow import WorkflowEntity


# Workflow repository interface
class IWorkflowRepository(Protocol):
    """Protocol for workflow definition repository (DIP)."""

    async def get_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        """Return workflow by ID."""

    async def get_by_id_for_update(self, workflow_id: str) -> WorkflowEntity | None:
        """Return workflow by ID with its row locked for the rest of the transaction."""

    async def get_default(self) -> WorkflowEntity | None:
        """Return the active default workflow, if any."""

    async def list_workflows(self, query: WorkflowListQuery) -> list[WorkflowEntity]:
        """Return workflows, default first then newest."""

    async def list_active(self) -> list[WorkflowEntity]:
        """Return active workflows, default first then by name."""

    async def get_active_by_name(self, name: str) -> WorkflowEntity | None:
        """Return the active workflow with this name (case-insensitive), if any."""

    async def active_name_exists(self, name: str, exclude_id: str | None = None) -> bool:
        """Return True if an active workflow (other than exclude_id) has this name, case-insensitively."""

    async def create(self, workflow: WorkflowEntity) -> WorkflowEntity:
        """Insert a new workflow definition."""

    async def save(self, workflow: WorkflowEntity, expected_version: int) -> WorkflowEntity:
        """Write name/description/steps/is_active when the stored version still matches.

        Raises ConcurrentModificationError when another writer got there first.
        """

    async def lock_all_for_update(self) -> None:
        """Lock every workflow row, in id order, for the rest of the transaction."""

    async def set_default(self, workflow_id: str) -> None:
        """Make workflow_id the only default in one statement over the collection."""


# Task repository interface
class ITaskRepository(Protocol):
    """Protocol for task progression repository (DIP)."""

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        """Return task by ID."""

    async def create(self, task: TaskEntity) -> TaskEntity:
        """Insert a new task."""

    async def save(self, task: TaskEntity, expected_version: int) -> TaskEntity:
        """Write progression state when the stored version still matches."""

    async def count_live_at_step(self, workflow_id: str, order: int) -> int:
        """Return the number of active/on-hold tasks currently at the given step."""

    async def shift_steps(
        self, workflow_id: str, from_order: int, delta: int, total_steps: int
    ) -> int:
        """Shift current_step by delta for tasks at or after from_order; set total_steps on all tasks."""

    async def remap_steps(
        self, workflow_id: str, mapping: dict[int, int], total_steps: int
    ) -> int:
        """Move tasks from old step order to new step order in one statement."""
