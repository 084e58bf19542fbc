"""Task use cases: start a task on a workflow and move it between steps."""

from __future__ import annotations

from taskflow.application.dtos.identity import CallerIdentity
from taskflow.application.dtos.task import TaskCompletedEvent, TaskCreate, TaskStartedEvent
from taskflow.application.interfaces.repositories import ITaskRepository, IWorkflowRepository
from taskflow.application.interfaces.services import IWorkflowStatsRecorder
from taskflow.application.services.step_progression import (
    advance_task,
    can_client_view,
    revert_task,
)
from taskflow.domain.entities.task import TaskEntity
from taskflow.domain.entities.workflow import WorkflowEntity
from taskflow.domain.enums import StepAction
from taskflow.domain.exceptions import (
    InactiveWorkflowError,
    ResourceNotFoundException,
)
from taskflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class TaskService:
    """Start tasks and apply progression actions, keeping history and stats in step."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        workflow_repo: IWorkflowRepository,
        stats_recorder: IWorkflowStatsRecorder,
    ) -> None:
        self.task_repo = task_repo
        self.workflow_repo = workflow_repo
        self.stats_recorder = stats_recorder

    async def create_task(self, data: TaskCreate, caller: CallerIdentity) -> TaskEntity:
        """Start a task at step 1 of the given workflow, or of the default workflow.

        Raises:
            ResourceNotFoundException: Workflow missing, or no default workflow is set.
            InactiveWorkflowError: Workflow is inactive.
        """
        if data.workflow_id:
            workflow = await self.workflow_repo.get_by_id(data.workflow_id)
            if not workflow:
                raise ResourceNotFoundException("workflow", data.workflow_id)
        else:
            workflow = await self.workflow_repo.get_default()
            if not workflow:
                raise ResourceNotFoundException("workflow", "default")
        if not workflow.can_be_assigned():
            raise InactiveWorkflowError(workflow.id)

        task = TaskEntity.start(
            data.title,
            workflow.id,
            workflow.step_count,
            client_id=data.client_id,
            created_by=caller.user_id,
        )
        created = await self.task_repo.create(task)
        await self.stats_recorder.task_started(TaskStartedEvent(workflow.id, created.id))
        logger.info("Task started: id=%s workflow=%s", created.id, workflow.id)
        return created

    async def get_task(self, task_id: str, caller: CallerIdentity) -> TaskEntity:
        """Return task; clients only see their own tasks at client-visible steps."""
        task = await self._require_task(task_id)
        if caller.is_client:
            workflow = await self._require_workflow(task.workflow_id)
            if not can_client_view(task, workflow.steps, caller):
                raise ResourceNotFoundException("task", task_id)
        return task

    async def advance(
        self,
        task_id: str,
        action: StepAction,
        caller: CallerIdentity,
        *,
        comment: str | None = None,
        expected_version: int | None = None,
    ) -> TaskEntity:
        """Apply action to the task's current step and persist the result.

        On completion a TaskCompletedEvent is handed to the stats recorder.
        """
        task, workflow = await self._lock_for_progression(task_id)
        version = task.version if expected_version is None else expected_version

        transition = advance_task(task, workflow.steps, action, caller)
        task.apply_transition(transition, changed_by=caller.user_id, description=comment)
        saved = await self.task_repo.save(task, expected_version=version)

        if transition.completed:
            completed_at = saved.completed_at or task.completed_at
            await self.stats_recorder.task_completed(
                TaskCompletedEvent(
                    workflow_id=workflow.id,
                    task_id=saved.id,
                    started_at=saved.started_at,
                    completed_at=completed_at,
                )
            )
            logger.info("Task completed: id=%s workflow=%s", saved.id, workflow.id)
        else:
            logger.info(
                "Task advanced: id=%s action=%s step %d -> %d",
                saved.id,
                action.value,
                transition.step_from,
                transition.step_to,
            )
        return saved

    async def revert(
        self,
        task_id: str,
        caller: CallerIdentity,
        *,
        steps_back: int = 1,
        reason: str | None = None,
        expected_version: int | None = None,
    ) -> TaskEntity:
        """Move a task back steps_back steps; reopens completed tasks."""
        task, workflow = await self._lock_for_progression(task_id)
        version = task.version if expected_version is None else expected_version

        transition = revert_task(task, workflow.steps, caller, steps_back=steps_back)
        task.apply_transition(transition, changed_by=caller.user_id, description=reason)
        saved = await self.task_repo.save(task, expected_version=version)
        logger.info(
            "Task moved back: id=%s step %d -> %d reopened=%s",
            saved.id,
            transition.step_from,
            transition.step_to,
            transition.reopened,
        )
        return saved

    async def _require_task(self, task_id: str) -> TaskEntity:
        task = await self.task_repo.get_by_id(task_id)
        if not task:
            raise ResourceNotFoundException("task", task_id)
        return task

    async def _lock_for_progression(self, task_id: str) -> tuple[TaskEntity, WorkflowEntity]:
        """Lock the task's workflow row, then re-read the task.

        Step edits hold the same lock while they count and move tasks, so a
        task cannot land on a step that is being removed.
        """
        task = await self._require_task(task_id)
        workflow = await self.workflow_repo.get_by_id_for_update(task.workflow_id)
        if not workflow:
            raise ResourceNotFoundException("workflow", task.workflow_id)
        return await self._require_task(task_id), workflow

    async def _require_workflow(self, workflow_id: str) -> WorkflowEntity:
        workflow = await self.workflow_repo.get_by_id(workflow_id)
        if not workflow:
            raise ResourceNotFoundException("workflow", workflow_id)
        return workflow
