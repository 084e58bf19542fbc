"""Workflow operations: create, query, default switch and step edits.

Every edit loads the workflow with its row locked, applies the change on the
domain entity (which re-validates) and writes it back with a conditional
update on ``version``. Step edits also move the tasks of the workflow so each
task stays on the same step it was on before the edit.
"""

from __future__ import annotations

from typing import Any

from taskflow.application.dtos.workflow import StepInput, WorkflowCreate, WorkflowListQuery
from taskflow.application.interfaces.repositories import ITaskRepository, IWorkflowRepository
from taskflow.domain.entities.workflow import WorkflowEntity, WorkflowStep
from taskflow.domain.exceptions import (
    ConcurrentModificationError,
    DuplicateWorkflowNameError,
    InactiveWorkflowError,
    ReferencedStepError,
    ResourceNotFoundException,
    ValidationException,
)
from taskflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class WorkflowService:
    """Create, edit and query workflow definitions."""

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        task_repo: ITaskRepository,
    ) -> None:
        self.workflow_repo = workflow_repo
        self.task_repo = task_repo

    # ---- Queries ----

    async def get_workflow(self, workflow_id: str) -> WorkflowEntity:
        """Return workflow by id; raise ResourceNotFoundException if missing."""
        workflow = await self.workflow_repo.get_by_id(workflow_id)
        if not workflow:
            raise ResourceNotFoundException("workflow", workflow_id)
        return workflow

    async def list_workflows(self, query: WorkflowListQuery | None = None) -> list[WorkflowEntity]:
        """Return workflows, default first then newest; inactive ones only when asked."""
        return await self.workflow_repo.list_workflows(query or WorkflowListQuery())

    async def list_active_workflows(self) -> list[WorkflowEntity]:
        return await self.workflow_repo.list_active()

    async def get_default_workflow(self) -> WorkflowEntity:
        """Return the active default workflow; raise ResourceNotFoundException when none is set."""
        workflow = await self.workflow_repo.get_default()
        if not workflow:
            raise ResourceNotFoundException("workflow", "default")
        return workflow

    # ---- Definition lifecycle ----

    async def create_workflow(
        self, data: WorkflowCreate, *, created_by: str | None = None
    ) -> WorkflowEntity:
        """Validate and store a new workflow.

        Step orders are assigned from list position; is_default starts False and
        stats start at zero.

        Raises:
            ValidationException: Empty steps, bad name or description.
            InvalidStepError: A step fails validation.
            DuplicateWorkflowNameError: An active workflow already has this name.
        """
        if not data.steps:
            raise ValidationException("A workflow needs at least one step", field="steps")
        steps = [step.to_step() for step in data.steps]
        workflow = WorkflowEntity.new(
            data.name,
            data.description,
            steps,
            created_by=created_by,
            is_active=data.is_active,
        )
        if workflow.is_active and await self.workflow_repo.active_name_exists(workflow.name):
            raise DuplicateWorkflowNameError(workflow.name)
        created = await self.workflow_repo.create(workflow)
        logger.info(
            "Workflow created: id=%s name=%r steps=%d", created.id, created.name, created.step_count
        )
        return created

    async def update_workflow(
        self,
        workflow_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        expected_version: int | None = None,
    ) -> WorkflowEntity:
        """Rename and/or change the description. An empty description clears it."""
        workflow = await self._load_for_edit(workflow_id, expected_version)
        if name is not None:
            workflow.rename(name)
            if workflow.is_active and await self.workflow_repo.active_name_exists(
                workflow.name, exclude_id=workflow.id
            ):
                raise DuplicateWorkflowNameError(workflow.name)
        if description is not None:
            workflow.change_description(description or None)
        return await self._save(workflow)

    async def deactivate_workflow(
        self, workflow_id: str, *, expected_version: int | None = None
    ) -> WorkflowEntity:
        """Soft-delete a workflow. The default workflow cannot be deactivated."""
        workflow = await self._load_for_edit(workflow_id, expected_version)
        if workflow.is_default:
            raise ValidationException(
                "The default workflow cannot be deactivated; choose another default first",
                field="is_default",
                value=True,
            )
        if not workflow.is_active:
            return workflow
        workflow.is_active = False
        saved = await self._save(workflow)
        logger.info("Workflow deactivated: id=%s", workflow_id)
        return saved

    async def activate_workflow(
        self, workflow_id: str, *, expected_version: int | None = None
    ) -> WorkflowEntity:
        """Re-activate a workflow; its name must still be unique among active ones."""
        workflow = await self._load_for_edit(workflow_id, expected_version)
        if workflow.is_active:
            return workflow
        if await self.workflow_repo.active_name_exists(workflow.name, exclude_id=workflow.id):
            raise DuplicateWorkflowNameError(workflow.name)
        workflow.is_active = True
        saved = await self._save(workflow)
        logger.info("Workflow activated: id=%s", workflow_id)
        return saved

    async def set_default(self, workflow_id: str) -> WorkflowEntity:
        """Make workflow_id the single default workflow.

        Idempotent. The previous default is cleared by the same statement that
        sets the new one. Every workflow row is locked in id order before the
        target is read.

        Raises:
            ResourceNotFoundException: Workflow does not exist.
            InactiveWorkflowError: Workflow is inactive.
        """
        await self.workflow_repo.lock_all_for_update()
        workflow = await self.workflow_repo.get_by_id(workflow_id)
        if not workflow:
            raise ResourceNotFoundException("workflow", workflow_id)
        if not workflow.is_active:
            raise InactiveWorkflowError(workflow_id)
        if not workflow.is_default:
            await self.workflow_repo.set_default(workflow_id)
            logger.info("Default workflow set: id=%s", workflow_id)
        return await self.get_workflow(workflow_id)

    # ---- Step edits ----

    async def insert_step(
        self,
        workflow_id: str,
        position: int,
        step: StepInput,
        *,
        expected_version: int | None = None,
    ) -> WorkflowEntity:
        """Insert a step at position (clamped to [1, len + 1]) and renumber.

        Tasks at or beyond the inserted position move up by one so they keep
        pointing at the same step.
        """
        new_step = step.to_step()
        workflow = await self._load_for_edit(workflow_id, expected_version)
        placed_at = workflow.insert_step(position, new_step)
        saved = await self._save(workflow)
        moved = await self.task_repo.shift_steps(
            workflow_id, from_order=placed_at, delta=1, total_steps=saved.step_count
        )
        logger.info(
            "Step inserted: workflow=%s order=%d name=%r tasks_shifted=%d",
            workflow_id,
            placed_at,
            new_step.name,
            moved,
        )
        return saved

    async def remove_step(
        self, workflow_id: str, order: int, *, expected_version: int | None = None
    ) -> WorkflowEntity:
        """Remove the step at order and renumber.

        Raises:
            ResourceNotFoundException: No step with this order.
            LastStepError: It is the only step.
            ReferencedStepError: Live tasks are currently at this step.
        """
        workflow = await self._load_for_edit(workflow_id, expected_version)
        workflow.require_step(order)
        if workflow.step_count > 1:
            in_use = await self.task_repo.count_live_at_step(workflow_id, order)
            if in_use:
                raise ReferencedStepError(workflow_id, order, in_use)
        removed = workflow.remove_step(order)
        saved = await self._save(workflow)
        await self.task_repo.shift_steps(
            workflow_id, from_order=order + 1, delta=-1, total_steps=saved.step_count
        )
        logger.info("Step removed: workflow=%s order=%d name=%r", workflow_id, order, removed.name)
        return saved

    async def reorder_steps(
        self,
        workflow_id: str,
        step_ids: list[str],
        *,
        expected_version: int | None = None,
    ) -> WorkflowEntity:
        """Reorder steps to follow step_ids, a permutation of the current step ids.

        Raises:
            InvalidPermutationError: step_ids has duplicates, unknown or missing ids.
        """
        workflow = await self._load_for_edit(workflow_id, expected_version)
        mapping = workflow.reorder_steps(list(step_ids))
        saved = await self._save(workflow)
        moves = {old: new for old, new in mapping.items() if old != new}
        if moves:
            await self.task_repo.remap_steps(workflow_id, moves, total_steps=saved.step_count)
        logger.info("Steps reordered: workflow=%s moved=%d", workflow_id, len(moves))
        return saved

    async def update_step(
        self,
        workflow_id: str,
        order: int,
        changes: dict[str, Any],
        *,
        expected_version: int | None = None,
    ) -> WorkflowEntity:
        """Edit one step's name, description, color, icon or settings; the step is re-validated."""
        workflow = await self._load_for_edit(workflow_id, expected_version)
        step: WorkflowStep = workflow.update_step(order, **changes)
        saved = await self._save(workflow)
        logger.info("Step updated: workflow=%s order=%d name=%r", workflow_id, order, step.name)
        return saved

    # ---- Internals ----

    async def _load_for_edit(
        self, workflow_id: str, expected_version: int | None
    ) -> WorkflowEntity:
        workflow = await self.workflow_repo.get_by_id_for_update(workflow_id)
        if not workflow:
            raise ResourceNotFoundException("workflow", workflow_id)
        if expected_version is not None and workflow.version != expected_version:
            logger.warning(
                "Stale workflow edit: id=%s expected_version=%d current=%d",
                workflow_id,
                expected_version,
                workflow.version,
            )
            raise ConcurrentModificationError("workflow", workflow_id, expected_version)
        return workflow

    async def _save(self, workflow: WorkflowEntity) -> WorkflowEntity:
        return await self.workflow_repo.save(workflow, expected_version=workflow.version)
