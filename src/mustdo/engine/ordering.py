"""Task ordering, quadrant grouping and the manual reorder planner.

Important tasks always come before the rest, whatever the sort mode. Manual
reordering never moves a task across the importance or completion boundary.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from mustdo.models.task import (
    QUADRANT_MAX,
    QUADRANT_MIN,
    ReorderDirection,
    SortMode,
    Task,
)

QUADRANTS = tuple(range(QUADRANT_MIN, QUADRANT_MAX + 1))

_NEXT_MODE = {
    SortMode.DUE: SortMode.CREATED,
    SortMode.CREATED: SortMode.MANUAL,
    SortMode.MANUAL: SortMode.DUE,
}


def _key_for(mode: SortMode) -> Callable[[Task], tuple]:
    if mode == SortMode.CREATED:
        return lambda t: (not t.important, t.created_at, t.due_at, t.id)
    if mode == SortMode.MANUAL:
        return lambda t: (not t.important, t.sort_order, t.due_at, t.id)
    return lambda t: (not t.important, t.due_at, t.created_at, t.id)


def sort_with_pinned_important(
    tasks: Iterable[Task], mode: SortMode = SortMode.DUE
) -> list[Task]:
    """Total order: importance partition first, then the mode's keys, then id."""
    return sorted(tasks, key=_key_for(mode))


def cycle_sort_mode(mode: SortMode) -> SortMode:
    return _NEXT_MODE[mode]


def group_by_quadrant(tasks: Iterable[Task]) -> dict[int, list[Task]]:
    """Bucket tasks by quadrant, keeping their input order inside each bucket."""
    groups: dict[int, list[Task]] = {q: [] for q in QUADRANTS}
    for task in tasks:
        if task.quadrant in groups:
            groups[task.quadrant].append(task)
    return groups


def quadrant_counts(tasks: Iterable[Task]) -> dict[int, dict[str, int]]:
    counts = {q: {"total": 0, "completed": 0} for q in QUADRANTS}
    for task in tasks:
        entry = counts.get(task.quadrant)
        if entry is None:
            continue
        entry["total"] += 1
        if task.completed:
            entry["completed"] += 1
    return counts


def move_to_quadrant(task: Task, quadrant: int, now: int) -> Task:
    """Reassign ``task`` to ``quadrant``; it lands last in manual order."""
    if quadrant not in QUADRANTS:
        raise ValueError(
            f"quadrant must be between {QUADRANT_MIN} and {QUADRANT_MAX}")
    if task.quadrant == quadrant:
        return task
    return task.model_copy(
        update={"quadrant": quadrant, "sort_order": now * 1000, "updated_at": now})


def find_reorder_target(
    tasks: Sequence[Task], task_id: str, direction: ReorderDirection
) -> Optional[int]:
    """Index of the nearest neighbour in ``direction`` in the mover's group.

    A neighbour qualifies only if it shares both the ``important`` and the
    ``completed`` flag with the mover. Returns None when the scan leaves the
    list (or the task is not in it).
    """
    index = next((i for i, t in enumerate(tasks) if t.id == task_id), None)
    if index is None:
        return None
    mover = tasks[index]
    step = -1 if direction == ReorderDirection.UP else 1
    target = index + step
    while 0 <= target < len(tasks):
        candidate = tasks[target]
        if (
            candidate.important == mover.important
            and candidate.completed == mover.completed
        ):
            return target
        target += step
    return None


def swap_sort_order(mover: Task, target: Task, now: int) -> tuple[Task, Task]:
    """Exchange manual sort keys between two tasks."""
    return (
        mover.model_copy(update={"sort_order": target.sort_order, "updated_at": now}),
        target.model_copy(update={"sort_order": mover.sort_order, "updated_at": now}),
    )
