"""Workflow repository integration tests (SQLite in memory, never committed)."""

from datetime import timedelta

import pytest

from taskflow.application.dtos.task import TaskCompletedEvent, TaskStartedEvent
from taskflow.application.dtos.workflow import WorkflowListQuery
from taskflow.domain.entities.workflow import WorkflowEntity, WorkflowStep
from taskflow.domain.exceptions import ConcurrentModificationError, ResourceNotFoundException
from taskflow.infrastructure.persistence.repositories.workflow_repo import WorkflowRepository
from taskflow.infrastructure.services.workflow_stats_service import WorkflowStatsRecorder
from taskflow.shared.utils.datetime import utc_now


def _entity(name: str, description: str | None = None) -> WorkflowEntity:
    return WorkflowEntity.new(name, description, [WorkflowStep(name="A"), WorkflowStep(name="B")])


async def test_create_and_get_by_id(db_session) -> None:
    """Create a workflow then read it back with its steps."""
    repo = WorkflowRepository(db_session)
    created = await repo.create(_entity("Pipeline"))
    assert created.version == 1
    assert created.is_default is False
    found = await repo.get_by_id(created.id)
    assert found is not None
    assert [s.name for s in found.steps] == ["A", "B"]
    assert found.steps[0].id == created.steps[0].id
    assert found.created_at is not None and found.created_at.tzinfo is not None


async def test_get_by_id_not_found_returns_none(db_session) -> None:
    assert await WorkflowRepository(db_session).get_by_id("nonexistent-id") is None


async def test_set_default_moves_the_flag(db_session) -> None:
    """After setting A then B as default, only B is default."""
    repo = WorkflowRepository(db_session)
    a = await repo.create(_entity("A"))
    b = await repo.create(_entity("B"))
    await repo.set_default(a.id)
    assert (await repo.get_default()).id == a.id
    await repo.lock_all_for_update()
    await repo.set_default(b.id)
    everything = await repo.list_workflows(WorkflowListQuery(include_inactive=True))
    assert [w.id for w in everything if w.is_default] == [b.id]
    assert (await repo.get_default()).id == b.id


async def test_save_bumps_version_and_detects_conflict(db_session) -> None:
    """A save with a stale version raises and leaves the stored row alone."""
    repo = WorkflowRepository(db_session)
    created = await repo.create(_entity("Pipeline"))
    created.rename("Renamed")
    saved = await repo.save(created, expected_version=1)
    assert saved.version == 2
    assert saved.name == "Renamed"

    created.rename("Lost update")
    with pytest.raises(ConcurrentModificationError):
        await repo.save(created, expected_version=1)
    assert (await repo.get_by_id(created.id)).name == "Renamed"


async def test_save_missing_row(db_session) -> None:
    with pytest.raises(ResourceNotFoundException):
        await WorkflowRepository(db_session).save(_entity("Ghost"), expected_version=1)


async def test_list_search_and_active_name(db_session) -> None:
    """Search matches name or description case-insensitively; inactive rows are hidden."""
    repo = WorkflowRepository(db_session)
    social = await repo.create(_entity("Social Media", "Posts for Instagram"))
    video = await repo.create(_entity("Video", "YouTube 100% edits"))
    hidden = _entity("Social Archive")
    hidden.is_active = False
    await repo.create(hidden)

    found = await repo.list_workflows(WorkflowListQuery(search="SOCIAL"))
    assert [w.id for w in found] == [social.id]
    by_description = await repo.list_workflows(WorkflowListQuery(search="instagram"))
    assert [w.id for w in by_description] == [social.id]
    by_percent = await repo.list_workflows(WorkflowListQuery(search="100%"))
    assert [w.id for w in by_percent] == [video.id]

    assert await repo.active_name_exists("social media")
    assert not await repo.active_name_exists("social media", exclude_id=social.id)
    assert not await repo.active_name_exists("Social Archive")
    assert (await repo.get_active_by_name("VIDEO")).id == video.id


async def test_stats_recorder_running_average(db_session) -> None:
    """Starts and completions update counters and the average in hours."""
    repo = WorkflowRepository(db_session)
    recorder = WorkflowStatsRecorder(db_session)
    wf = await repo.create(_entity("Pipeline"))
    now = utc_now()

    await recorder.task_started(TaskStartedEvent(wf.id, "t1"))
    await recorder.task_started(TaskStartedEvent(wf.id, "t2"))
    await recorder.task_completed(TaskCompletedEvent(wf.id, "t1", now - timedelta(hours=2), now))
    await recorder.task_completed(TaskCompletedEvent(wf.id, "t2", now - timedelta(hours=4), now))

    stats = (await repo.get_by_id(wf.id)).stats
    assert stats.total_tasks == 2
    assert stats.completed_tasks == 2
    assert stats.average_completion_time == pytest.approx(3.0)
    assert (await repo.get_by_id(wf.id)).version == 1


async def test_stats_for_missing_workflow_is_ignored(db_session) -> None:
    recorder = WorkflowStatsRecorder(db_session)
    now = utc_now()
    await recorder.task_completed(TaskCompletedEvent("missing", "t1", now, now))
