"""Pytest configuration and fixtures for taskflow.

Tests run against an in-memory SQLite database (aiosqlite) shared through a
StaticPool; each test gets a fresh schema. The app's session dependencies are
overridden to use it, so HTTP tests exercise the real repositories.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("TELEMETRY_ENABLED", "false")

from collections.abc import Callable  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from taskflow.application.dtos.identity import CallerIdentity  # noqa: E402
from taskflow.domain.enums import UserRole  # noqa: E402
from taskflow.infrastructure.persistence import models  # noqa: E402,F401
from taskflow.infrastructure.persistence.database import (  # noqa: E402
    Base,
    get_db,
    get_db_transactional,
)
from taskflow.infrastructure.security.jwt import CallerTokenCodec  # noqa: E402
from taskflow.main import app  # noqa: E402


@pytest.fixture
async def engine() -> AsyncEngine:
    """Fresh in-memory database with all tables created."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncSession:
    """Database session for repository/integration tests (never committed)."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) backed by the test database."""

    async def _get_db():
        async with session_factory() as session:
            yield session

    async def _get_db_transactional():
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_db_transactional] = _get_db_transactional
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Build Authorization headers for a caller: auth_headers("admin"), auth_headers("client", client_id="c1")."""

    def _headers(role: str, *, user_id: str | None = None, client_id: str | None = None) -> dict[str, str]:
        caller = CallerIdentity(user_id or f"{role}-1", UserRole(role), client_id=client_id)
        return {"Authorization": f"Bearer {CallerTokenCodec.from_settings().encode(caller)}"}

    return _headers
