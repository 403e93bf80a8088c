"""List membership, display sections and the free-text search predicate."""

from __future__ import annotations

from datetime import timedelta, tzinfo
from typing import Iterable, Optional

from mustdo.engine.ordering import sort_with_pinned_important
from mustdo.engine.presets import local_day_at, to_local
from mustdo.models.task import SortMode, Task, ViewScope, ViewTab


def _day_offset(task: Task, now: int, tz: Optional[tzinfo]) -> int:
    """Calendar days between today and the task's due date (local time)."""
    return (to_local(task.due_at, tz).date() - to_local(now, tz).date()).days


def is_overdue(task: Task, now: int) -> bool:
    return not task.completed and task.due_at < now


def is_due_today(task: Task, now: int, tz: Optional[tzinfo] = None) -> bool:
    return _day_offset(task, now, tz) == 0


def is_due_tomorrow(task: Task, now: int, tz: Optional[tzinfo] = None) -> bool:
    return _day_offset(task, now, tz) == 1


def is_due_in_future(task: Task, now: int, tz: Optional[tzinfo] = None) -> bool:
    """Due after the end of tomorrow."""
    day_after = to_local(now, tz).date() + timedelta(days=2)
    return task.due_at >= local_day_at(day_after, 0, 0, tz)


def in_tab(task: Task, tab: ViewTab, now: int, tz: Optional[tzinfo] = None) -> bool:
    if tab == ViewTab.TODO:
        return not task.completed and (
            is_overdue(task, now) or is_due_today(task, now, tz))
    if tab == ViewTab.TODAY:
        return not task.completed and is_due_today(task, now, tz)
    if tab == ViewTab.OPEN:
        return not task.completed
    if tab == ViewTab.DONE:
        return task.completed
    return True


def sort_done(tasks: Iterable[Task]) -> list[Task]:
    """Most recently completed first; ties keep creation order."""
    def key(t: Task) -> tuple[int, int]:
        finished = t.completed_at if t.completed_at is not None else t.updated_at
        return (-finished, t.created_at)

    return sorted(tasks, key=key)


def visible_tasks(
    tasks: Iterable[Task],
    tab: ViewTab,
    now: int,
    mode: SortMode = SortMode.DUE,
    tz: Optional[tzinfo] = None,
) -> list[Task]:
    """Tasks shown on ``tab``, in display order."""
    members = [t for t in tasks if in_tab(t, tab, now, tz)]
    if tab == ViewTab.DONE:
        return sort_done(members)
    return sort_with_pinned_important(members, mode)


def filter_by_scope(
    tasks: Iterable[Task],
    scope: ViewScope,
    now: int,
    tz: Optional[tzinfo] = None,
    project_id: Optional[str] = None,
) -> list[Task]:
    if scope == ViewScope.TODAY:
        return [
            t for t in tasks if is_due_today(t, now, tz) or is_overdue(t, now)
        ]
    if scope == ViewScope.IMPORTANT:
        return [t for t in tasks if t.important]
    return [t for t in tasks if t.project_id == project_id]


def build_search_text(task: Task) -> str:
    parts = [task.title]
    if task.notes:
        parts.append(task.notes)
    parts.extend(step.title for step in task.steps)
    parts.extend(task.tags)
    return "\n".join(parts).strip().lower()


def matches(task: Task, query: str) -> bool:
    """Every whitespace-separated token must occur somewhere in the task text.

    A leading ``#`` on a token is ignored, so ``#work`` also finds "work" in
    the title or notes.
    """
    tokens = query.strip().lower().split()
    if not tokens:
        return True
    text = build_search_text(task)
    for raw in tokens:
        token = raw[1:] if raw.startswith("#") else raw
        if token and token not in text:
            return False
    return True


def filter_by_query(tasks: Iterable[Task], query: str) -> list[Task]:
    if not query.strip():
        return list(tasks)
    return [t for t in tasks if matches(t, query)]


def completion_sections(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    tasks = list(tasks)
    open_tasks = [t for t in tasks if not t.completed]
    done = [t for t in tasks if t.completed]
    return {"all": open_tasks + done, "open": open_tasks, "done": done}


def due_sections(
    tasks: Iterable[Task], now: int, tz: Optional[tzinfo] = None
) -> list[tuple[str, list[Task]]]:
    """Split an ordered list into overdue / today / tomorrow / future / completed."""
    sections: dict[str, list[Task]] = {
        "overdue": [], "today": [], "tomorrow": [], "future": [], "completed": [],
    }
    for task in tasks:
        if task.completed:
            sections["completed"].append(task)
        elif is_overdue(task, now):
            sections["overdue"].append(task)
        elif is_due_today(task, now, tz):
            sections["today"].append(task)
        elif is_due_tomorrow(task, now, tz):
            sections["tomorrow"].append(task)
        else:
            sections["future"].append(task)
    return list(sections.items())
