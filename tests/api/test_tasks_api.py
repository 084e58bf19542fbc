"""Tests for task progression endpoints."""

import pytest
from httpx import AsyncClient

from taskflow.application.services.default_workflows import social_media_workflow

WORKFLOWS = "/api/v1/workflows"
TASKS = "/api/v1/tasks"


@pytest.fixture
def admin(auth_headers) -> dict[str, str]:
    return auth_headers("admin")


@pytest.fixture
def staff(auth_headers) -> dict[str, str]:
    return auth_headers("user")


@pytest.fixture
def acme(auth_headers) -> dict[str, str]:
    return auth_headers("client", user_id="acme-user", client_id="acme")


@pytest.fixture
async def social_default(client: AsyncClient, admin) -> dict:
    """The social media workflow, created through the API and set as default."""
    data = social_media_workflow()
    body = {
        "name": data.name,
        "description": data.description,
        "steps": [
            {
                "name": s.name,
                "description": s.description,
                "color": s.color,
                "icon": s.icon,
                "settings": s.settings.to_dict(),
            }
            for s in data.steps
        ],
    }
    created = await client.post(WORKFLOWS, json=body, headers=admin)
    assert created.status_code == 201, created.text
    response = await client.post(f"{WORKFLOWS}/{created.json()['id']}/default", headers=admin)
    return response.json()


async def _start(client: AsyncClient, headers: dict) -> dict:
    response = await client.post(TASKS, json={"title": "Launch post", "client_id": "acme"}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def _advance(client: AsyncClient, task_id: str, headers: dict, action: str = "approve"):
    return await client.post(f"{TASKS}/{task_id}/advance", json={"action": action}, headers=headers)


async def test_create_task_without_default_returns_404(client: AsyncClient, staff) -> None:
    """Starting a task needs a default workflow when none is given."""
    response = await client.post(TASKS, json={"title": "Post"}, headers=staff)
    assert response.status_code == 404


async def test_client_cannot_create_task(client: AsyncClient, social_default, acme) -> None:
    response = await client.post(TASKS, json={"title": "Post"}, headers=acme)
    assert response.status_code == 403


async def test_task_starts_on_default_and_counts_stats(client: AsyncClient, social_default, staff, admin) -> None:
    task = await _start(client, staff)
    assert task["workflow_id"] == social_default["id"]
    assert task["current_step"] == 1
    assert task["total_steps"] == 8
    assert task["history"][0]["action"] == "created"

    workflow = (await client.get(f"{WORKFLOWS}/{social_default['id']}", headers=admin)).json()
    assert workflow["stats"]["total_tasks"] == 1


async def test_reject_at_internal_review_keeps_step(client: AsyncClient, social_default, staff) -> None:
    """Revisão Interna needs an approval; reject is refused and the task stays."""
    task = await _start(client, staff)
    for _ in range(3):
        assert (await _advance(client, task["id"], staff)).status_code == 200

    response = await _advance(client, task["id"], staff, action="reject")
    assert response.status_code == 409
    assert response.json()["error"] == "AWAITING_APPROVAL"
    current = (await client.get(f"{TASKS}/{task['id']}", headers=staff)).json()
    assert current["current_step"] == 4


async def test_full_walk_with_client_approval(client: AsyncClient, social_default, staff, acme, admin) -> None:
    """Staff move the task to the client step, the client approves, staff finish it."""
    task = await _start(client, staff)
    hidden = await client.get(f"{TASKS}/{task['id']}", headers=acme)
    assert hidden.status_code == 404

    for _ in range(4):
        assert (await _advance(client, task["id"], staff)).status_code == 200

    visible = await client.get(f"{TASKS}/{task['id']}", headers=acme)
    assert visible.status_code == 200
    assert visible.json()["current_step"] == 5

    staff_try = await _advance(client, task["id"], staff)
    assert staff_try.status_code == 403
    assert staff_try.json()["error"] == "UNAUTHORIZED_STEP_ACTION"
    assert (await _advance(client, task["id"], acme)).status_code == 200

    for _ in range(3):
        response = await _advance(client, task["id"], staff)
        assert response.status_code == 200
    done = response.json()
    assert done["status"] == "completed"
    assert done["current_step"] == 8
    assert done["completed_at"] is not None

    again = await _advance(client, task["id"], staff)
    assert again.status_code == 409
    assert again.json()["error"] == "TASK_COMPLETED"

    stats = (await client.get(f"{WORKFLOWS}/{social_default['id']}", headers=admin)).json()["stats"]
    assert stats["completed_tasks"] == 1


async def test_client_reject_keeps_task_at_client_step(client: AsyncClient, social_default, staff, acme) -> None:
    """The client's reject is refused with 409; the task waits at Aprovação Cliente."""
    task = await _start(client, staff)
    for _ in range(4):
        assert (await _advance(client, task["id"], staff)).status_code == 200

    for caller in (acme, staff):
        response = await _advance(client, task["id"], caller, action="reject")
        assert response.status_code == 409
        assert response.json()["error"] == "AWAITING_APPROVAL"
    current = (await client.get(f"{TASKS}/{task['id']}", headers=staff)).json()
    assert current["current_step"] == 5
    assert current["status"] == "active"


async def test_force_advance_admin_only(client: AsyncClient, social_default, staff, admin) -> None:
    task = await _start(client, staff)
    assert (await _advance(client, task["id"], staff, "force_advance")).status_code == 403
    response = await _advance(client, task["id"], admin, "force_advance")
    assert response.status_code == 200
    assert response.json()["current_step"] == 2


async def test_revert_and_reopen(client: AsyncClient, social_default, staff, acme) -> None:
    task = await _start(client, staff)
    await _advance(client, task["id"], staff)
    await _advance(client, task["id"], staff)

    response = await client.post(
        f"{TASKS}/{task['id']}/revert", json={"steps_back": 5, "reason": "Start over"}, headers=staff
    )
    assert response.status_code == 200
    assert response.json()["current_step"] == 1
    assert response.json()["history"][-1]["description"] == "Start over"

    at_first = await client.post(f"{TASKS}/{task['id']}/revert", json={}, headers=staff)
    assert at_first.status_code == 400

    client_revert = await client.post(f"{TASKS}/{task['id']}/revert", json={}, headers=acme)
    assert client_revert.status_code == 403


async def test_advance_with_stale_version(client: AsyncClient, social_default, staff) -> None:
    task = await _start(client, staff)
    await _advance(client, task["id"], staff)
    response = await client.post(
        f"{TASKS}/{task['id']}/advance",
        json={"action": "approve", "expected_version": task["version"]},
        headers=staff,
    )
    assert response.status_code == 409
    assert response.json()["error"] == "CONCURRENT_MODIFICATION"


async def test_remove_step_with_task_on_it(client: AsyncClient, social_default, staff, admin) -> None:
    """A step holding a live task cannot be removed."""
    await _start(client, staff)
    response = await client.delete(f"{WORKFLOWS}/{social_default['id']}/steps/1", headers=admin)
    assert response.status_code == 409
    assert response.json()["error"] == "REFERENCED_STEP"


async def test_insert_step_moves_task(client: AsyncClient, social_default, staff, admin) -> None:
    task = await _start(client, staff)
    response = await client.post(
        f"{WORKFLOWS}/{social_default['id']}/steps", json={"name": "Kickoff", "position": 1}, headers=admin
    )
    assert response.status_code == 201
    moved = (await client.get(f"{TASKS}/{task['id']}", headers=staff)).json()
    assert moved["current_step"] == 2
    assert moved["total_steps"] == 9
