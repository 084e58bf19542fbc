"""Task progression repository (implements ITaskRepository)."""

from __future__ import annotations

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.domain.entities.task import TaskEntity, TaskHistoryEntry
from taskflow.domain.enums import TaskStatus
from taskflow.domain.exceptions import ResourceNotFoundException
from taskflow.infrastructure.persistence.models.task import Task
from taskflow.infrastructure.persistence.repositories.base import BaseRepository
from taskflow.shared.utils.datetime import ensure_utc, utc_now

_LIVE_STATUSES = [status.value for status in TaskStatus.live()]


def _to_entity(row: Task) -> TaskEntity:
    return TaskEntity(
        id=row.id,
        title=row.title,
        workflow_id=row.workflow_id,
        current_step=row.current_step,
        total_steps=row.total_steps,
        client_id=row.client_id,
        status=TaskStatus(row.status),
        started_at=ensure_utc(row.started_at),
        completed_at=ensure_utc(row.completed_at),
        history=[TaskHistoryEntry.from_dict(entry) for entry in row.history or []],
        created_by=row.created_by,
        version=row.version,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


class TaskRepository(BaseRepository[Task]):
    """Task repository. Step shifts run as set-based UPDATEs scoped to one workflow."""

    resource_type = "task"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        row = await self.get_model(task_id)
        return _to_entity(row) if row else None

    async def create(self, task: TaskEntity) -> TaskEntity:
        now = utc_now()
        row = Task(
            id=task.id,
            title=task.title,
            workflow_id=task.workflow_id,
            client_id=task.client_id,
            status=task.status.value,
            current_step=task.current_step,
            total_steps=task.total_steps,
            started_at=task.started_at,
            completed_at=task.completed_at,
            history=[entry.to_dict() for entry in task.history],
            created_by=task.created_by,
            version=1,
            created_at=now,
            updated_at=now,
        )
        return _to_entity(await self.add(row))

    async def save(self, task: TaskEntity, expected_version: int) -> TaskEntity:
        await self.conditional_update(
            task.id,
            expected_version,
            {
                "status": task.status.value,
                "current_step": task.current_step,
                "total_steps": task.total_steps,
                "completed_at": task.completed_at,
                "history": [entry.to_dict() for entry in task.history],
            },
        )
        saved = await self.get_by_id(task.id)
        if saved is None:
            raise ResourceNotFoundException("task", task.id)
        return saved

    async def count_live_at_step(self, workflow_id: str, order: int) -> int:
        result = await self.db.execute(
            select(func.count(Task.id)).where(
                Task.workflow_id == workflow_id,
                Task.current_step == order,
                Task.status.in_(_LIVE_STATUSES),
            )
        )
        return result.scalar_one() or 0

    async def shift_steps(
        self, workflow_id: str, from_order: int, delta: int, total_steps: int
    ) -> int:
        """Shift tasks at or after from_order by delta, then resync total_steps.

        Completed tasks sitting on a removed last step are clamped to the new
        last step. Every task of the workflow gets a version bump.
        """
        shifted = await self.db.execute(
            update(Task)
            .where(Task.workflow_id == workflow_id, Task.current_step >= from_order)
            .values(current_step=Task.current_step + delta)
            .execution_options(synchronize_session=False)
        )
        await self._resync_total_steps(workflow_id, total_steps)
        return shifted.rowcount

    async def remap_steps(
        self, workflow_id: str, mapping: dict[int, int], total_steps: int
    ) -> int:
        """Move tasks from old to new step orders in a single CASE update."""
        if not mapping:
            return 0
        remapped = await self.db.execute(
            update(Task)
            .where(Task.workflow_id == workflow_id, Task.current_step.in_(list(mapping)))
            .values(
                current_step=case(mapping, value=Task.current_step, else_=Task.current_step)
            )
            .execution_options(synchronize_session=False)
        )
        await self._resync_total_steps(workflow_id, total_steps)
        return remapped.rowcount

    async def _resync_total_steps(self, workflow_id: str, total_steps: int) -> None:
        await self.db.execute(
            update(Task)
            .where(Task.workflow_id == workflow_id)
            .values(
                total_steps=total_steps,
                current_step=case(
                    (Task.current_step > total_steps, total_steps),
                    else_=Task.current_step,
                ),
                version=Task.version + 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
