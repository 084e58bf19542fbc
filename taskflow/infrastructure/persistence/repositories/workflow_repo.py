"""Workflow definition repository (implements IWorkflowRepository)."""

from __future__ import annotations

import logging

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.application.dtos.workflow import WorkflowListQuery
from taskflow.domain.entities.workflow import WorkflowEntity, WorkflowStats, WorkflowStep
from taskflow.domain.exceptions import ConcurrentModificationError, ResourceNotFoundException
from taskflow.infrastructure.persistence.models.workflow import Workflow
from taskflow.infrastructure.persistence.repositories.base import BaseRepository
from taskflow.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def _to_entity(row: Workflow) -> WorkflowEntity:
    return WorkflowEntity(
        id=row.id,
        name=row.name,
        description=row.description,
        steps=[WorkflowStep.from_dict(step) for step in row.steps],
        is_active=row.is_active,
        is_default=row.is_default,
        stats=WorkflowStats(
            total_tasks=row.total_tasks,
            completed_tasks=row.completed_tasks,
            average_completion_time=row.average_completion_time,
        ),
        created_by=row.created_by,
        version=row.version,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


class WorkflowRepository(BaseRepository[Workflow]):
    """Workflow repository. Returns WorkflowEntity; never writes stats."""

    resource_type = "workflow"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Workflow)

    async def get_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        row = await self.get_model(workflow_id)
        return _to_entity(row) if row else None

    async def get_by_id_for_update(self, workflow_id: str) -> WorkflowEntity | None:
        row = await self.get_model(workflow_id, for_update=True)
        return _to_entity(row) if row else None

    async def get_default(self) -> WorkflowEntity | None:
        result = await self.db.execute(
            select(Workflow)
            .where(Workflow.is_default.is_(True), Workflow.is_active.is_(True))
            .order_by(Workflow.updated_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def list_workflows(self, query: WorkflowListQuery) -> list[WorkflowEntity]:
        q = select(Workflow)
        if not query.include_inactive:
            q = q.where(Workflow.is_active.is_(True))
        if query.search and query.search.strip():
            term = query.search.strip()
            q = q.where(
                or_(
                    Workflow.name.icontains(term, autoescape=True),
                    Workflow.description.icontains(term, autoescape=True),
                )
            )
        q = (
            q.order_by(
                Workflow.is_default.desc(), Workflow.created_at.desc(), Workflow.id.desc()
            )
            .offset(query.skip)
            .limit(query.limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(q)
        return [_to_entity(row) for row in result.scalars().all()]

    async def list_active(self) -> list[WorkflowEntity]:
        result = await self.db.execute(
            select(Workflow)
            .where(Workflow.is_active.is_(True))
            .order_by(Workflow.is_default.desc(), Workflow.name.asc())
            .execution_options(populate_existing=True)
        )
        return [_to_entity(row) for row in result.scalars().all()]

    async def get_active_by_name(self, name: str) -> WorkflowEntity | None:
        result = await self.db.execute(
            select(Workflow)
            .where(
                Workflow.is_active.is_(True),
                func.lower(Workflow.name) == name.strip().lower(),
            )
            .limit(1)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def active_name_exists(self, name: str, exclude_id: str | None = None) -> bool:
        q = select(func.count(Workflow.id)).where(
            Workflow.is_active.is_(True),
            func.lower(Workflow.name) == name.strip().lower(),
        )
        if exclude_id:
            q = q.where(Workflow.id != exclude_id)
        result = await self.db.execute(q)
        return (result.scalar_one() or 0) > 0

    async def create(self, workflow: WorkflowEntity) -> WorkflowEntity:
        now = utc_now()
        row = Workflow(
            id=workflow.id,
            name=workflow.name,
            description=workflow.description,
            steps=[step.to_dict() for step in workflow.steps],
            is_active=workflow.is_active,
            is_default=False,
            created_by=workflow.created_by,
            total_tasks=0,
            completed_tasks=0,
            average_completion_time=0.0,
            version=1,
            created_at=now,
            updated_at=now,
        )
        return _to_entity(await self.add(row))

    async def save(self, workflow: WorkflowEntity, expected_version: int) -> WorkflowEntity:
        """Write the definition fields if the stored version matches; return the stored entity."""
        try:
            await self.conditional_update(
                workflow.id,
                expected_version,
                {
                    "name": workflow.name,
                    "description": workflow.description,
                    "steps": [step.to_dict() for step in workflow.ordered_steps],
                    "is_active": workflow.is_active,
                },
            )
        except ConcurrentModificationError:
            logger.warning(
                "Workflow write conflict: id=%s expected_version=%d", workflow.id, expected_version
            )
            raise
        saved = await self.get_by_id(workflow.id)
        if saved is None:
            raise ResourceNotFoundException("workflow", workflow.id)
        return saved

    async def lock_all_for_update(self) -> None:
        """Lock every workflow row in id order.

        Callers that need more than one row take this lock first, so two of
        them always queue on the same row instead of deadlocking.
        """
        await self.db.execute(select(Workflow.id).order_by(Workflow.id).with_for_update())

    async def set_default(self, workflow_id: str) -> None:
        """Set is_default = (id = workflow_id) on every row in one UPDATE.

        Run after lock_all_for_update so concurrent callers serialize and the
        last one wins everywhere; the collection never holds two defaults.
        updated_at moves only on rows whose flag changes.
        """
        target = Workflow.id == workflow_id
        await self.db.execute(
            update(Workflow)
            .values(
                is_default=target,
                updated_at=case(
                    (or_(Workflow.is_default.is_(True), target), utc_now()),
                    else_=Workflow.updated_at,
                ),
            )
            .execution_options(synchronize_session=False)
        )
