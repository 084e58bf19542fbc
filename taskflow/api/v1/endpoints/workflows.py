"""Workflow API: thin routes delegating to WorkflowService.

Reads are open to any authenticated caller; definition edits and the default
switch are admin only.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from taskflow.api.v1.dependencies import (
    get_caller,
    get_workflow_service,
    get_workflow_service_for_write,
    require_role,
)
from taskflow.application.dtos.identity import CallerIdentity
from taskflow.application.dtos.workflow import WorkflowCreate, WorkflowListQuery
from taskflow.application.use_cases.workflows import WorkflowService
from taskflow.core.limiter import limit_writes
from taskflow.domain.enums import UserRole
from taskflow.schemas.workflow import (
    StepInsertRequest,
    StepReorderRequest,
    StepUpdateRequest,
    WorkflowCreateRequest,
    WorkflowResponse,
    WorkflowUpdateRequest,
)

router = APIRouter()

WorkflowReader = Annotated[WorkflowService, Depends(get_workflow_service)]
WorkflowWriter = Annotated[WorkflowService, Depends(get_workflow_service_for_write)]
Admin = Annotated[
    CallerIdentity, Depends(require_role(UserRole.ADMIN, resource="workflow", action="edit"))
]


@router.get("", response_model=list[WorkflowResponse])
async def list_workflows(
    service: WorkflowReader,
    _: Annotated[CallerIdentity, Depends(get_caller)],
    include_inactive: bool = False,
    search: str | None = Query(default=None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """List workflows, default first then newest."""
    workflows = await service.list_workflows(
        WorkflowListQuery(
            include_inactive=include_inactive, search=search, skip=skip, limit=limit
        )
    )
    return [WorkflowResponse.model_validate(w) for w in workflows]


@router.get("/active", response_model=list[WorkflowResponse])
async def list_active_workflows(
    service: WorkflowReader,
    _: Annotated[CallerIdentity, Depends(get_caller)],
):
    """Active workflows for task assignment, default first then by name."""
    return [WorkflowResponse.model_validate(w) for w in await service.list_active_workflows()]


@router.get("/default", response_model=WorkflowResponse)
async def get_default_workflow(
    service: WorkflowReader,
    _: Annotated[CallerIdentity, Depends(get_caller)],
):
    """Return the default workflow (404 when none is set)."""
    return WorkflowResponse.model_validate(await service.get_default_workflow())


@router.get("/{workflow_id}", response_model=WorkflowResponse)
async def get_workflow(
    workflow_id: str,
    service: WorkflowReader,
    _: Annotated[CallerIdentity, Depends(get_caller)],
):
    return WorkflowResponse.model_validate(await service.get_workflow(workflow_id))


@router.post("", response_model=WorkflowResponse, status_code=201)
@limit_writes
async def create_workflow(
    request: Request,
    body: WorkflowCreateRequest,
    service: WorkflowWriter,
    caller: Admin,
):
    """Create a workflow. Step order follows list position."""
    workflow = await service.create_workflow(
        WorkflowCreate(
            name=body.name,
            description=body.description,
            steps=[step.to_input() for step in body.steps],
            is_active=body.is_active,
        ),
        created_by=caller.user_id,
    )
    return WorkflowResponse.model_validate(workflow)


@router.patch("/{workflow_id}", response_model=WorkflowResponse)
@limit_writes
async def update_workflow(
    request: Request,
    workflow_id: str,
    body: WorkflowUpdateRequest,
    service: WorkflowWriter,
    _: Admin,
):
    """Rename a workflow or change its description."""
    workflow = await service.update_workflow(
        workflow_id,
        name=body.name,
        description=body.description,
        expected_version=body.expected_version,
    )
    return WorkflowResponse.model_validate(workflow)


@router.delete("/{workflow_id}", response_model=WorkflowResponse)
@limit_writes
async def deactivate_workflow(
    request: Request,
    workflow_id: str,
    service: WorkflowWriter,
    _: Admin,
):
    """Deactivate (soft delete) a workflow. The default workflow is refused."""
    return WorkflowResponse.model_validate(await service.deactivate_workflow(workflow_id))


@router.post("/{workflow_id}/activate", response_model=WorkflowResponse)
@limit_writes
async def activate_workflow(
    request: Request,
    workflow_id: str,
    service: WorkflowWriter,
    _: Admin,
):
    return WorkflowResponse.model_validate(await service.activate_workflow(workflow_id))


@router.post("/{workflow_id}/default", response_model=WorkflowResponse)
@limit_writes
async def set_default_workflow(
    request: Request,
    workflow_id: str,
    service: WorkflowWriter,
    _: Admin,
):
    """Make this workflow the single default."""
    return WorkflowResponse.model_validate(await service.set_default(workflow_id))


@router.post("/{workflow_id}/steps", response_model=WorkflowResponse, status_code=201)
@limit_writes
async def insert_step(
    request: Request,
    workflow_id: str,
    body: StepInsertRequest,
    service: WorkflowWriter,
    _: Admin,
):
    """Insert a step at position (clamped); appends when position is omitted."""
    position = body.position
    if position is None:
        position = (await service.get_workflow(workflow_id)).step_count + 1
    workflow = await service.insert_step(
        workflow_id, position, body.to_input(), expected_version=body.expected_version
    )
    return WorkflowResponse.model_validate(workflow)


@router.put("/{workflow_id}/steps/order", response_model=WorkflowResponse)
@limit_writes
async def reorder_steps(
    request: Request,
    workflow_id: str,
    body: StepReorderRequest,
    service: WorkflowWriter,
    _: Admin,
):
    """Reorder steps; body lists every step id exactly once."""
    workflow = await service.reorder_steps(
        workflow_id, body.step_ids, expected_version=body.expected_version
    )
    return WorkflowResponse.model_validate(workflow)


@router.patch("/{workflow_id}/steps/{order}", response_model=WorkflowResponse)
@limit_writes
async def update_step(
    request: Request,
    workflow_id: str,
    order: int,
    body: StepUpdateRequest,
    service: WorkflowWriter,
    _: Admin,
):
    workflow = await service.update_step(
        workflow_id, order, body.changes(), expected_version=body.expected_version
    )
    return WorkflowResponse.model_validate(workflow)


@router.delete("/{workflow_id}/steps/{order}", response_model=WorkflowResponse)
@limit_writes
async def remove_step(
    request: Request,
    workflow_id: str,
    order: int,
    service: WorkflowWriter,
    _: Admin,
    expected_version: int | None = Query(default=None, ge=1),
):
    """Remove a step; refused for the last step or while live tasks sit on it."""
    workflow = await service.remove_step(workflow_id, order, expected_version=expected_version)
    return WorkflowResponse.model_validate(workflow)
