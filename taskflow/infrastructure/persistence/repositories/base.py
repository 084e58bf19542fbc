"""Base repository: primary-key reads, inserts and version-checked updates."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.domain.exceptions import ConcurrentModificationError, ResourceNotFoundException
from taskflow.infrastructure.persistence.database import Base
from taskflow.shared.utils.datetime import utc_now


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_model, add and conditional_update.

    Subclasses map rows to domain entities and pass ``resource_type`` for
    error messages. Rows are always re-read with populate_existing so bulk
    UPDATE statements issued earlier in the session are visible.
    """

    resource_type: str = "resource"

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_model(self, entity_id: str, *, for_update: bool = False) -> ModelType | None:
        """Return a single row by primary key, or None. Optionally lock it (ignored by SQLite)."""
        model: Any = self.model
        stmt = (
            select(self.model)
            .where(model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new row and refresh server-generated columns."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def conditional_update(
        self, entity_id: str, expected_version: int, values: dict[str, Any]
    ) -> None:
        """UPDATE the row only if its version still equals expected_version; bump version.

        Raises:
            ResourceNotFoundException: No row with this id.
            ConcurrentModificationError: Row exists but another writer changed it first.
        """
        model: Any = self.model
        stmt = (
            update(self.model)
            .where(model.id == entity_id, model.version == expected_version)
            .values(**values, version=expected_version + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 1:
            return
        exists = await self.db.execute(select(model.id).where(model.id == entity_id))
        if exists.scalar_one_or_none() is None:
            raise ResourceNotFoundException(self.resource_type, entity_id)
        raise ConcurrentModificationError(self.resource_type, entity_id, expected_version)
