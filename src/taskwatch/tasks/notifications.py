# src/taskwatch/tasks/notifications.py

from __future__ import annotations

"""
Task notifications and their delivery to the foreground loop.

A Task publishes notifications on its worker thread. NotificationChannel
hops them onto one asyncio event loop, where a single consumer callback
processes them:

- every RunningChanged / StatusChanged is delivered, in emission order;
- ProgressChanged may be coalesced: when a progress delivery is already
  queued, a newer value replaces it instead of queueing another callback.

The loop's callback queue is FIFO, so a queued progress flush always runs
before a RunningChanged(False) published after it.
"""

import asyncio
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RunningChanged:
    running: bool

    property_name: ClassVar[str] = "running"

    @property
    def value(self) -> bool:
        return self.running


@dataclass(slots=True, frozen=True)
class StatusChanged:
    text: str

    property_name: ClassVar[str] = "status"

    @property
    def value(self) -> str:
        return self.text


@dataclass(slots=True, frozen=True)
class ProgressChanged:
    percent: int

    property_name: ClassVar[str] = "progress"

    @property
    def value(self) -> int:
        return self.percent


Notification = RunningChanged | StatusChanged | ProgressChanged
NotificationCallback = Callable[[Notification], None]


class NotificationChannel:
    """
    Thread-safe bridge from worker threads to a single consumer on `loop`.

    publish() may be called from any thread. The consumer always runs on the
    loop thread, so it can mutate foreground state without locking.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        consumer: NotificationCallback,
        *,
        coalesce_progress: bool = True,
    ) -> None:
        self._loop = loop
        self._consumer = consumer
        self._coalesce_progress = coalesce_progress

        self._lock = threading.Lock()
        self._pending_progress: ProgressChanged | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def publish(self, note: Notification) -> None:
        with self._lock:
            if self._closed:
                return

            if isinstance(note, ProgressChanged) and self._coalesce_progress:
                already_queued = self._pending_progress is not None
                self._pending_progress = note
                if already_queued:
                    return
                self._schedule(self._flush_progress)
                return

            self._schedule(self._deliver, note)

    def close(self) -> None:
        """Stop accepting notifications; anything still queued is dropped."""
        with self._lock:
            self._closed = True
            self._pending_progress = None

    # ---- internal ----

    def _schedule(self, callback: Callable[..., None], *args: object) -> None:
        # Called with self._lock held, so scheduling order equals publish order.
        try:
            self._loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # Loop already closed: nobody is left to consume.
            logger.debug("Notification loop is closed; dropping %r", args or callback)

    def _flush_progress(self) -> None:
        with self._lock:
            note = self._pending_progress
            self._pending_progress = None
        if note is not None:
            self._deliver(note)

    def _deliver(self, note: Notification) -> None:
        if self.closed:
            return
        try:
            self._consumer(note)
        except Exception:
            logger.exception("Notification consumer failed for %r", note)
