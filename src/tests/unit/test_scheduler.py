"""Tests for the reminder poller against a temp SQLite database."""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.orm import Session

from mustdo.db.convert import to_domain, write_row
from mustdo.db.schema import TaskRecord
from mustdo.models.events import ForcedDue, NormalDue
from mustdo.models.task import Task
from mustdo.scheduler import ReminderOutbox, poll_once, run_reminder_poller

DUE = 100_000


def _seed(engine, **overrides) -> None:
    data = {
        "id": "t1",
        "title": "Call back",
        "due_at": DUE,
        "created_at": 1_000,
        "updated_at": 1_000,
    }
    data.update(overrides)
    with Session(engine) as session:
        session.add(write_row(TaskRecord(), Task.model_validate(data)))
        session.commit()


def test_poll_once_fires_and_persists(test_engine) -> None:
    _seed(test_engine, id="f", reminder={"kind": "forced"})
    _seed(test_engine, id="n", reminder={"kind": "normal"})
    _seed(test_engine, id="quiet")
    sink = ReminderOutbox()

    result = poll_once(lambda: Session(test_engine), DUE, sink=sink)

    assert {t.id for t in result.updated} == {"f", "n"}
    events = sink.drain()
    assert [type(e) for e in events] == [ForcedDue, NormalDue]
    assert events[0].task.id == "f"
    assert len(sink) == 0

    with Session(test_engine) as session:
        stored = to_domain(session.get(TaskRecord, "f"))
    assert stored.reminder.last_fired_at == DUE

    again = poll_once(lambda: Session(test_engine), DUE + 60, sink=sink)
    assert again.events == []
    assert sink.drain() == []


def test_poll_once_skips_completed(test_engine) -> None:
    _seed(test_engine, reminder={"kind": "forced"}, completed=True, completed_at=50)
    result = poll_once(lambda: Session(test_engine), DUE, sink=ReminderOutbox())
    assert result.updated == []


def test_outbox_drops_oldest_when_full() -> None:
    task = Task(id="x", title="x", due_at=1, created_at=1, updated_at=1)
    box = ReminderOutbox(maxlen=2)
    box.push([ForcedDue(task=task, index=i, total=3) for i in (1, 2, 3)])
    assert [e.index for e in box.drain()] == [2, 3]


def test_poller_logs_and_keeps_running(caplog) -> None:
    calls = []

    def broken_factory() -> Session:
        calls.append(1)
        raise RuntimeError("database is gone")

    async def run_briefly() -> None:
        poller = asyncio.create_task(
            run_reminder_poller(broken_factory, interval_seconds=0.5))
        await asyncio.sleep(0.2)
        poller.cancel()
        try:
            await poller
        except asyncio.CancelledError:
            pass

    with caplog.at_level(logging.ERROR, logger="mustdo.scheduler"):
        asyncio.run(run_briefly())

    assert calls == [1]
    assert "reminder poll failed" in caplog.text
