# src/taskwatch/cli/demo.py

"""
Demo workload for the console: a task that counts through ticks.

It sleeps `ms_per_tick` per tick, reports progress every tick and a
"Passed N%" status every tenth of the way, and polls for cancellation
before each tick.
"""

from __future__ import annotations

import logging
import time

from ..errors import InvalidInputError
from ..tasks.task import Task, WorkFunction

logger = logging.getLogger(__name__)

COUNTING_RESULT = 5


def parse_ms_per_tick(text: str) -> int:
    """Validate the user-supplied milliseconds-per-tick value."""
    raw = (text or "").strip()
    try:
        value = int(raw)
    except ValueError as e:
        raise InvalidInputError(f"Invalid integer: {raw!r}") from e
    if value < 0:
        raise InvalidInputError(f"Milliseconds per tick must not be negative: {value}")
    return value


def make_counting_work(ms_per_tick: int, ticks: int = 100) -> WorkFunction:
    delay_s = max(0, ms_per_tick) / 1000.0
    ticks = max(1, int(ticks))
    status_every = max(1, ticks // 10)

    def count(task: Task) -> int | None:
        logger.debug("Counting task: starting (%d ticks, %d ms each)", ticks, ms_per_tick)
        task.set_progress(0)

        i = 0
        while i < ticks and not task.is_cancelled():
            time.sleep(delay_s)

            pct = i * 100 // ticks
            if i % status_every == 0 and i != 0:
                logger.debug("Counting task: progress is %d", pct)
                task.set_status(f"Passed {pct}%")
            task.set_progress(pct)
            i += 1

        if task.is_cancelled():
            logger.debug("Counting task: canceled at tick %d", i)
            return None

        logger.debug("Counting task: finished")
        return COUNTING_RESULT

    return count
