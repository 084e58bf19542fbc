"""Install the standard social media workflow and make it the default.

Idempotent: an active workflow with the same name is reused rather than
duplicated; it is (re)marked as default either way.

Usage:
    python -m scripts.seed_default_workflow

Requires: DATABASE_URL, SECRET_KEY and a migrated database (alembic upgrade head).
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from taskflow.application.services.default_workflows import social_media_workflow
from taskflow.application.use_cases.workflows import WorkflowService
from taskflow.domain.entities.workflow import WorkflowEntity
from taskflow.infrastructure.persistence.database import dispose_engine, get_session_factory
from taskflow.infrastructure.persistence.repositories import TaskRepository, WorkflowRepository
from taskflow.shared.telemetry.logging import setup_logging

logger = logging.getLogger("scripts.seed_default_workflow")


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_* when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def seed_default_workflow() -> WorkflowEntity:
    """Create (if missing) and set the social media workflow as default."""
    session_factory = get_session_factory()
    definition = social_media_workflow()
    async with session_factory() as session:
        async with session.begin():
            workflow_repo = WorkflowRepository(session)
            service = WorkflowService(workflow_repo, TaskRepository(session))
            existing = await workflow_repo.get_active_by_name(definition.name)
            if existing:
                logger.info("Workflow %r already present (id=%s)", existing.name, existing.id)
                workflow = existing
            else:
                workflow = await service.create_workflow(definition, created_by=None)
            return await service.set_default(workflow.id)


async def main() -> None:
    _load_env()
    setup_logging()
    try:
        workflow = await seed_default_workflow()
        logger.info(
            "Default workflow: %s (%s, %d steps)", workflow.name, workflow.id, workflow.step_count
        )
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
