"""
Reminder poller.

A small polling loop that, every ``interval_seconds``:
- loads armed reminders and fires the due ones (ReminderService.poll),
- queues the resulting events in the outbox for the display layer.

Delivery (popups, toasts, sounds) belongs to whoever drains the outbox.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections import deque
from datetime import tzinfo
from typing import Callable, Optional

from sqlalchemy.orm import Session

from mustdo.models.events import PollResult, ReminderEvent
from mustdo.services.reminders import ReminderService

logger = logging.getLogger(__name__)

MIN_INTERVAL_SEC = 0.5
DEFAULT_OUTBOX_SIZE = 256


class ReminderOutbox:
    """Bounded FIFO of reminder events awaiting delivery; oldest drop first."""

    def __init__(self, maxlen: int = DEFAULT_OUTBOX_SIZE) -> None:
        self._events: deque[ReminderEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._events)

    def push(self, events: list[ReminderEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def drain(self) -> list[ReminderEvent]:
        with self._lock:
            events = list(self._events)
            self._events.clear()
        return events


outbox = ReminderOutbox()


def poll_once(
    session_factory: Callable[[], Session],
    now: int,
    tz: Optional[tzinfo] = None,
    sink: Optional[ReminderOutbox] = None,
) -> PollResult:
    """Run one poll in a fresh session and queue its events."""
    with session_factory() as session:
        result = ReminderService(session, tz).poll(now)
    if result.events:
        (sink if sink is not None else outbox).push(result.events)
    return result


async def run_reminder_poller(
    session_factory: Callable[[], Session],
    *,
    interval_seconds: float = 30.0,
    tz: Optional[tzinfo] = None,
    sink: Optional[ReminderOutbox] = None,
) -> None:
    """
    Poll forever. A failed poll is logged and retried on the next tick.

    To stop the poller, cancel the coroutine/task.
    """
    sleep_s = max(MIN_INTERVAL_SEC, float(interval_seconds))
    logger.info("reminder poller started interval=%.1fs", sleep_s)

    while True:
        now = int(time.time())
        try:
            await asyncio.to_thread(poll_once, session_factory, now, tz, sink)
        except Exception:
            logger.exception("reminder poll failed now=%s", now)
        await asyncio.sleep(sleep_s)
