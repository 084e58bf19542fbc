"""Task progression API: start tasks and move them through their workflow."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from taskflow.api.v1.dependencies import (
    get_caller,
    get_task_service,
    get_task_service_for_write,
    require_role,
)
from taskflow.application.dtos.identity import CallerIdentity
from taskflow.application.dtos.task import TaskCreate
from taskflow.application.use_cases.tasks import TaskService
from taskflow.core.limiter import limit_writes
from taskflow.domain.enums import UserRole
from taskflow.schemas.task import (
    TaskAdvanceRequest,
    TaskCreateRequest,
    TaskResponse,
    TaskRevertRequest,
)

router = APIRouter()

Staff = Annotated[
    CallerIdentity,
    Depends(require_role(UserRole.ADMIN, UserRole.USER, resource="task", action="manage")),
]


@router.post("", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    body: TaskCreateRequest,
    service: Annotated[TaskService, Depends(get_task_service_for_write)],
    caller: Staff,
):
    """Start a task at step 1; uses the default workflow when none is given."""
    task = await service.create_task(
        TaskCreate(title=body.title, client_id=body.client_id, workflow_id=body.workflow_id),
        caller,
    )
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    service: Annotated[TaskService, Depends(get_task_service)],
    caller: Annotated[CallerIdentity, Depends(get_caller)],
):
    """Get task by id. Clients only see their own tasks at client-visible steps."""
    return TaskResponse.model_validate(await service.get_task(task_id, caller))


@router.post("/{task_id}/advance", response_model=TaskResponse)
@limit_writes
async def advance_task(
    request: Request,
    task_id: str,
    body: TaskAdvanceRequest,
    service: Annotated[TaskService, Depends(get_task_service_for_write)],
    caller: Annotated[CallerIdentity, Depends(get_caller)],
):
    """Approve, reject or force the current step; step rules decide who may do what."""
    task = await service.advance(
        task_id,
        body.action,
        caller,
        comment=body.comment,
        expected_version=body.expected_version,
    )
    return TaskResponse.model_validate(task)


@router.post("/{task_id}/revert", response_model=TaskResponse)
@limit_writes
async def revert_task(
    request: Request,
    task_id: str,
    body: TaskRevertRequest,
    service: Annotated[TaskService, Depends(get_task_service_for_write)],
    caller: Staff,
):
    """Move a task back; a completed task is reopened."""
    task = await service.revert(
        task_id,
        caller,
        steps_back=body.steps_back,
        reason=body.reason,
        expected_version=body.expected_version,
    )
    return TaskResponse.model_validate(task)
