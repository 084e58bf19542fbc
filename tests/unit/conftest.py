"""In-memory fakes of the repository and stats ports for use-case tests."""

import copy

import pytest

from taskflow.application.dtos.task import TaskCompletedEvent, TaskStartedEvent
from taskflow.application.dtos.workflow import WorkflowListQuery
from taskflow.application.use_cases.tasks import TaskService
from taskflow.application.use_cases.workflows import WorkflowService
from taskflow.domain.entities.task import TaskEntity
from taskflow.domain.entities.workflow import WorkflowEntity
from taskflow.domain.enums import TaskStatus
from taskflow.domain.exceptions import ConcurrentModificationError, ResourceNotFoundException
from taskflow.shared.utils.datetime import utc_now


class InMemoryWorkflowRepository:
    """Stores copies so callers cannot mutate stored state without save()."""

    def __init__(self) -> None:
        self.rows: dict[str, WorkflowEntity] = {}
        # Lock requests in call order; "*" is the whole collection.
        self.locks: list[str] = []

    async def get_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        row = self.rows.get(workflow_id)
        return copy.deepcopy(row) if row else None

    async def get_by_id_for_update(self, workflow_id: str) -> WorkflowEntity | None:
        self.locks.append(workflow_id)
        return await self.get_by_id(workflow_id)

    async def lock_all_for_update(self) -> None:
        self.locks.append("*")

    async def get_default(self) -> WorkflowEntity | None:
        for row in self.rows.values():
            if row.is_default and row.is_active:
                return copy.deepcopy(row)
        return None

    async def get_active_by_name(self, name: str) -> WorkflowEntity | None:
        for row in self.rows.values():
            if row.is_active and row.name.lower() == name.strip().lower():
                return copy.deepcopy(row)
        return None

    async def list_workflows(self, query: WorkflowListQuery) -> list[WorkflowEntity]:
        rows = [r for r in self.rows.values() if query.include_inactive or r.is_active]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        rows.sort(key=lambda r: r.is_default, reverse=True)
        return [copy.deepcopy(r) for r in rows[query.skip : query.skip + query.limit]]

    async def list_active(self) -> list[WorkflowEntity]:
        rows = sorted((r for r in self.rows.values() if r.is_active), key=lambda r: r.name)
        rows.sort(key=lambda r: r.is_default, reverse=True)
        return [copy.deepcopy(r) for r in rows]

    async def active_name_exists(self, name: str, exclude_id: str | None = None) -> bool:
        return any(
            r.is_active and r.name.lower() == name.strip().lower() and r.id != exclude_id
            for r in self.rows.values()
        )

    async def create(self, workflow: WorkflowEntity) -> WorkflowEntity:
        stored = copy.deepcopy(workflow)
        stored.created_at = stored.updated_at = utc_now()
        self.rows[stored.id] = stored
        return copy.deepcopy(stored)

    async def save(self, workflow: WorkflowEntity, expected_version: int) -> WorkflowEntity:
        current = self.rows.get(workflow.id)
        if current is None:
            raise ResourceNotFoundException("workflow", workflow.id)
        if current.version != expected_version:
            raise ConcurrentModificationError("workflow", workflow.id, expected_version)
        stored = copy.deepcopy(workflow)
        stored.version = expected_version + 1
        stored.is_default = current.is_default
        stored.stats = current.stats
        stored.updated_at = utc_now()
        self.rows[stored.id] = stored
        return copy.deepcopy(stored)

    async def set_default(self, workflow_id: str) -> None:
        for row in self.rows.values():
            row.is_default = row.id == workflow_id


class InMemoryTaskRepository:
    def __init__(self) -> None:
        self.rows: dict[str, TaskEntity] = {}

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        row = self.rows.get(task_id)
        return copy.deepcopy(row) if row else None

    async def create(self, task: TaskEntity) -> TaskEntity:
        self.rows[task.id] = copy.deepcopy(task)
        return copy.deepcopy(task)

    async def save(self, task: TaskEntity, expected_version: int) -> TaskEntity:
        current = self.rows[task.id]
        if current.version != expected_version:
            raise ConcurrentModificationError("task", task.id, expected_version)
        stored = copy.deepcopy(task)
        stored.version = expected_version + 1
        self.rows[task.id] = stored
        return copy.deepcopy(stored)

    async def count_live_at_step(self, workflow_id: str, order: int) -> int:
        return sum(
            1
            for t in self.rows.values()
            if t.workflow_id == workflow_id
            and t.current_step == order
            and t.status in TaskStatus.live()
        )

    async def shift_steps(
        self, workflow_id: str, from_order: int, delta: int, total_steps: int
    ) -> int:
        shifted = 0
        for t in self.rows.values():
            if t.workflow_id != workflow_id:
                continue
            if t.current_step >= from_order:
                t.current_step += delta
                shifted += 1
            t.total_steps = total_steps
            t.current_step = min(t.current_step, total_steps)
        return shifted

    async def remap_steps(
        self, workflow_id: str, mapping: dict[int, int], total_steps: int
    ) -> int:
        moved = 0
        for t in self.rows.values():
            if t.workflow_id == workflow_id and t.current_step in mapping:
                t.current_step = mapping[t.current_step]
                moved += 1
            if t.workflow_id == workflow_id:
                t.total_steps = total_steps
        return moved


class RecordingStatsRecorder:
    def __init__(self) -> None:
        self.started: list[TaskStartedEvent] = []
        self.completed: list[TaskCompletedEvent] = []

    async def task_started(self, event: TaskStartedEvent) -> None:
        self.started.append(event)

    async def task_completed(self, event: TaskCompletedEvent) -> None:
        self.completed.append(event)


@pytest.fixture
def workflow_repo() -> InMemoryWorkflowRepository:
    return InMemoryWorkflowRepository()


@pytest.fixture
def task_repo() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def stats_recorder() -> RecordingStatsRecorder:
    return RecordingStatsRecorder()


@pytest.fixture
def workflow_service(workflow_repo, task_repo) -> WorkflowService:
    return WorkflowService(workflow_repo, task_repo)


@pytest.fixture
def task_service(task_repo, workflow_repo, stats_recorder) -> TaskService:
    return TaskService(task_repo, workflow_repo, stats_recorder)
