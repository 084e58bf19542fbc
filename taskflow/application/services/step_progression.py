"""Step progression rules: how a task moves through its workflow.

Pure functions over a task and the ordered steps of its workflow. They
compute a StepTransition or raise; they never mutate the task or touch
storage. The use case applies the transition and persists it.
"""

from __future__ import annotations

from collections.abc import Sequence

from taskflow.application.dtos.identity import CallerIdentity
from taskflow.domain.entities.task import TaskEntity
from taskflow.domain.entities.workflow import WorkflowStep
from taskflow.domain.enums import StepAction, TaskStatus
from taskflow.domain.exceptions import (
    AwaitingApprovalError,
    ResourceNotFoundException,
    TaskAlreadyCompletedError,
    UnauthorizedStepActionError,
    ValidationException,
)
from taskflow.domain.value_objects.core import StepTransition


def _step_at(steps: Sequence[WorkflowStep], order: int) -> WorkflowStep | None:
    return next((s for s in steps if s.order == order), None)


def advance_task(
    task: TaskEntity,
    steps: Sequence[WorkflowStep],
    action: StepAction,
    caller: CallerIdentity,
) -> StepTransition:
    """Compute the result of performing action on the task's current step.

    Args:
        task: Task being progressed (read only).
        steps: The workflow's steps.
        action: approve, reject or force_advance.
        caller: Identity performing the action.

    Returns:
        Transition to ``order + 1``, or a completing transition (``step_to`` None)
        when the current step is the last one.

    Raises:
        TaskAlreadyCompletedError: Task is already completed.
        ValidationException: Task is cancelled.
        ResourceNotFoundException: Current step is not part of the workflow.
        UnauthorizedStepActionError: Caller may not perform action at this step.
        AwaitingApprovalError: Action is reject. A rejection never moves the task
            forward; staff send it back with a revert.
    """
    if task.status == TaskStatus.COMPLETED:
        raise TaskAlreadyCompletedError(task.id)
    if task.status == TaskStatus.CANCELLED:
        raise ValidationException("Cancelled tasks cannot be progressed", field="status", value=task.status.value)

    order = task.current_step
    step = _step_at(steps, order)
    if step is None:
        raise ResourceNotFoundException("step", str(order))

    if action == StepAction.FORCE_ADVANCE:
        if not caller.is_admin:
            raise UnauthorizedStepActionError(
                order, action.value, caller.role.value, "only administrators may force a task forward"
            )
    else:
        if caller.is_client:
            if not step.settings.is_client_approval_step:
                raise UnauthorizedStepActionError(
                    order, action.value, caller.role.value, "clients may only act on client approval steps"
                )
            if not caller.owns_client(task.client_id):
                raise UnauthorizedStepActionError(
                    order, action.value, caller.role.value, "task belongs to another client"
                )
        if action != StepAction.APPROVE:
            # A rejection leaves the task waiting on this step; moving back is a revert.
            raise AwaitingApprovalError(task.id, order, action.value)
        if step.settings.is_client_approval_step and not caller.owns_client(task.client_id):
            raise UnauthorizedStepActionError(
                order, action.value, caller.role.value, "only the task's client may approve this step"
            )

    last_order = max(s.order for s in steps)
    if order >= last_order:
        return StepTransition(action=action, step_from=order, step_to=None)
    return StepTransition(action=action, step_from=order, step_to=order + 1)


def revert_task(
    task: TaskEntity,
    steps: Sequence[WorkflowStep],
    caller: CallerIdentity,
    *,
    steps_back: int = 1,
) -> StepTransition:
    """Compute moving a task back by steps_back (never before step 1).

    A completed task is reopened: one step back lands on the last step.
    """
    if caller.is_client:
        raise UnauthorizedStepActionError(
            task.current_step, "revert", caller.role.value, "clients may not move tasks back"
        )
    if steps_back < 1:
        raise ValidationException("steps_back must be at least 1", field="steps_back", value=steps_back)
    if task.status == TaskStatus.CANCELLED:
        raise ValidationException("Cancelled tasks cannot be progressed", field="status", value=task.status.value)
    if not steps:
        raise ResourceNotFoundException("step", str(task.current_step))

    last_order = max(s.order for s in steps)
    if task.status == TaskStatus.COMPLETED:
        target = max(1, last_order - (steps_back - 1))
        return StepTransition(action=None, step_from=task.current_step, step_to=target, reopened=True)

    if task.current_step <= 1:
        raise ValidationException(
            "Task is already at the first step", field="current_step", value=task.current_step
        )
    target = max(1, task.current_step - steps_back)
    return StepTransition(action=None, step_from=task.current_step, step_to=target)


def can_client_view(
    task: TaskEntity, steps: Sequence[WorkflowStep], caller: CallerIdentity
) -> bool:
    """Return whether caller may see the task.

    Staff see every task. Clients see only their own tasks, and only while the
    current step allows client access.
    """
    if not caller.is_client:
        return True
    if not caller.owns_client(task.client_id):
        return False
    step = _step_at(steps, task.current_step)
    return step is not None and step.settings.allow_client_access
