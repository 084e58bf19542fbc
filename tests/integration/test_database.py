"""Session factory and lock-conflict translation in the persistence layer."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from taskflow.domain.exceptions import ConcurrentModificationError
from taskflow.infrastructure.persistence import database


class _DriverError(Exception):
    def __init__(self, sqlstate: str | None) -> None:
        super().__init__(f"driver error {sqlstate}")
        self.sqlstate = sqlstate


def _db_error(sqlstate: str | None) -> DBAPIError:
    return DBAPIError("UPDATE workflows SET is_default = ...", {}, _DriverError(sqlstate))


@pytest.fixture
async def shared_engine():
    """The module-level engine built from settings; disposed after the test."""
    yield
    await database.dispose_engine()


class TestLockConflict:
    @pytest.mark.parametrize("sqlstate", ["40P01", "40001"])
    def test_deadlock_and_serialization_are_conflicts(self, sqlstate: str) -> None:
        assert database.is_lock_conflict(_db_error(sqlstate))

    @pytest.mark.parametrize("sqlstate", ["23505", None])
    def test_other_errors_are_not(self, sqlstate) -> None:
        assert not database.is_lock_conflict(_db_error(sqlstate))

    def test_pgcode_is_read_as_well(self) -> None:
        orig = Exception("deadlock")
        orig.pgcode = "40P01"
        assert database.sqlstate_of(DBAPIError("SELECT 1", {}, orig)) == "40P01"


class TestTransactionalSession:
    async def test_deadlock_becomes_concurrent_modification(self, shared_engine) -> None:
        """A deadlock raised inside the request surfaces as a 409-mapped domain error."""
        dependency = database.get_db_transactional()
        await dependency.__anext__()
        with pytest.raises(ConcurrentModificationError) as exc_info:
            await dependency.athrow(_db_error("40P01"))
        assert exc_info.value.details["resource_id"] == "40P01"

    async def test_other_database_errors_propagate(self, shared_engine) -> None:
        dependency = database.get_db_transactional()
        await dependency.__anext__()
        with pytest.raises(DBAPIError):
            await dependency.athrow(_db_error("23505"))


class TestSessionFactory:
    async def test_public_factory_is_the_shared_one(self, shared_engine) -> None:
        factory = database.get_session_factory()
        assert factory is database.get_session_factory()
        assert database.get_engine() is database.engine
        async with factory() as session:
            assert (await session.execute(text("SELECT 1"))).scalar_one() == 1
