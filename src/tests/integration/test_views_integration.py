"""Integration tests for /api/views (tabs, quadrants, sections)."""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration

BASE = "/api/views"
TASKS_BASE = "/api/tasks"
PROJECTS_BASE = "/api/projects"
HOUR = 3600
DAY = 24 * HOUR


def _create_task(
    client: TestClient,
    now: int,
    title: str,
    *,
    complete_at: int | None = None,
    **payload,
) -> str:
    """Create a task via API; optionally complete it. Returns task id."""
    r = client.post(TASKS_BASE, params={"now": now}, json={"title": title, **payload})
    assert r.status_code == 201, r.text
    task_id = r.json()["id"]
    if complete_at is not None:
        complete_r = client.post(
            f"{TASKS_BASE}/{task_id}/complete", params={"now": complete_at})
        assert complete_r.status_code == 200, complete_r.text
    return task_id


@pytest.fixture
def client_with_view_fixtures(client_with_test_db: TestClient, now: int) -> TestClient:
    """
    Client with tasks in different states for view testing (now = Wed 09:00):

    - Overdue: due yesterday evening
    - Today: due 18:00 today, important
    - Tomorrow: due tomorrow evening, in the "Work" project
    - Later: due in a week, quadrant 2
    - Done early / Done late: completed at different times
    """
    client = client_with_test_db
    work = client.post(PROJECTS_BASE, params={"now": now}, json={"name": "Work"}).json()["id"]
    _create_task(client, now, "Overdue", due_at=now - 15 * HOUR)
    _create_task(client, now, "Today", due_at=now + 9 * HOUR, important=True)
    _create_task(client, now, "Tomorrow", due_at=now + DAY + 9 * HOUR, project_id=work)
    _create_task(client, now, "Later", due_at=now + 7 * DAY, quadrant=2)
    _create_task(client, now, "Done early", complete_at=now + 100)
    _create_task(client, now, "Done late", complete_at=now + 200)
    return client


def _titles(response) -> list[str]:
    assert response.status_code == 200, response.text
    return [t["title"] for t in response.json()]


def test_todo_tab(client_with_view_fixtures: TestClient, now: int) -> None:
    """todo = incomplete and overdue or due today, important first."""
    response = client_with_view_fixtures.get(f"{BASE}/tabs/todo", params={"now": now})
    assert _titles(response) == ["Today", "Overdue"]


def test_today_tab(client_with_view_fixtures: TestClient, now: int) -> None:
    response = client_with_view_fixtures.get(f"{BASE}/tabs/today", params={"now": now})
    assert _titles(response) == ["Today"]


def test_open_tab(client_with_view_fixtures: TestClient, now: int) -> None:
    response = client_with_view_fixtures.get(f"{BASE}/tabs/open", params={"now": now})
    assert _titles(response) == ["Today", "Overdue", "Tomorrow", "Later"]


def test_done_tab_most_recent_first(client_with_view_fixtures: TestClient, now: int) -> None:
    for sort in ("due", "created", "manual"):
        response = client_with_view_fixtures.get(
            f"{BASE}/tabs/done", params={"now": now, "sort": sort})
        assert _titles(response) == ["Done late", "Done early"]


def test_all_tab(client_with_view_fixtures: TestClient, now: int) -> None:
    response = client_with_view_fixtures.get(f"{BASE}/tabs/all", params={"now": now})
    assert len(_titles(response)) == 6


def test_tab_with_query(client_with_view_fixtures: TestClient, now: int) -> None:
    response = client_with_view_fixtures.get(
        f"{BASE}/tabs/all", params={"now": now, "q": "done LATE"})
    assert _titles(response) == ["Done late"]


def test_tab_with_scope(client_with_view_fixtures: TestClient, now: int) -> None:
    important = client_with_view_fixtures.get(
        f"{BASE}/tabs/open", params={"now": now, "scope": "important"})
    assert _titles(important) == ["Today"]

    work = client_with_view_fixtures.get(PROJECTS_BASE).json()[-1]["id"]
    project = client_with_view_fixtures.get(
        f"{BASE}/tabs/open", params={"now": now, "scope": "project", "project_id": work})
    assert _titles(project) == ["Tomorrow"]

    today = client_with_view_fixtures.get(
        f"{BASE}/tabs/open", params={"now": now, "scope": "today"})
    assert _titles(today) == ["Today", "Overdue"]


def test_project_scope_requires_project_id(client_with_test_db: TestClient, now: int) -> None:
    response = client_with_test_db.get(
        f"{BASE}/tabs/open", params={"now": now, "scope": "project"})
    assert response.status_code == 422


def test_unknown_tab_422(client_with_test_db: TestClient) -> None:
    assert client_with_test_db.get(f"{BASE}/tabs/someday").status_code == 422


def test_sections(client_with_view_fixtures: TestClient, now: int) -> None:
    response = client_with_view_fixtures.get(f"{BASE}/sections", params={"now": now})
    assert response.status_code == 200
    sections = {s["id"]: [t["title"] for t in s["tasks"]] for s in response.json()}
    assert list(sections) == ["overdue", "today", "tomorrow", "future", "completed"]
    assert sections["overdue"] == ["Overdue"]
    assert sections["today"] == ["Today"]
    assert sections["tomorrow"] == ["Tomorrow"]
    assert sections["future"] == ["Later"]
    assert set(sections["completed"]) == {"Done early", "Done late"}


def test_quadrants(client_with_view_fixtures: TestClient) -> None:
    response = client_with_view_fixtures.get(f"{BASE}/quadrants")
    assert response.status_code == 200
    board = response.json()
    assert [t["title"] for t in board["quadrants"]["2"]] == ["Later"]
    assert board["counts"]["1"] == {"total": 5, "completed": 2}
    assert board["counts"]["2"] == {"total": 1, "completed": 0}
    assert board["counts"]["4"] == {"total": 0, "completed": 0}


def test_next_sort_mode(client_with_test_db: TestClient) -> None:
    assert client_with_test_db.get(f"{BASE}/sort-modes/due/next").json() == {"mode": "created"}
    assert client_with_test_db.get(f"{BASE}/sort-modes/manual/next").json() == {"mode": "due"}
