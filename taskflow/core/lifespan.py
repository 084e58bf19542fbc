"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring (logging setup, SQL tracing,
telemetry flush, DB engine dispose); no business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from taskflow.core.config import get_settings
from taskflow.shared.telemetry.logging import setup_logging
from taskflow.shared.telemetry.telemetry import get_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and SQL tracing, then yield.

    Shutdown order: telemetry flush, SQL engine dispose.
    """
    from taskflow.infrastructure.persistence import database

    setup_logging()
    settings = get_settings()
    logger.info("%s %s starting", settings.app_name, settings.app_version)

    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.instrument_sqlalchemy(database.get_engine())

    yield

    # ---- Shutdown ----
    if telemetry is not None:
        telemetry.shutdown()

    if getattr(database, "engine", None) is not None:
        await database.dispose_engine()
        logger.info("Database engine disposed")
