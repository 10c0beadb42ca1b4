# src/taskwatch/tasks/coordinator.py

from __future__ import annotations

"""
Foreground controller for a single Task.

Coordinator.exec() starts the task and suspends its caller until the task's
work code has actually stopped. All coordinator state lives on the asyncio
loop that runs exec(); notifications from the worker thread reach it through
a NotificationChannel, so nothing here needs a lock.

State machine:

    NOT_STARTED -> STARTED -> (CANCEL_PENDING) -> FINISHED

FINISHED is entered only when RunningChanged(False) is observed, or when a
cancel signal arrives while the task is not running (nothing to wait for).
A cancel request alone never finishes the coordinator: the work function may
still be writing shared state until it polls is_cancelled() and returns.
"""

import asyncio
import logging
from enum import StrEnum

from ..core.ports import ProgressView
from .notifications import (
    Notification,
    NotificationChannel,
    ProgressChanged,
    RunningChanged,
    StatusChanged,
)
from .task import Task

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_STATUS = "Working..."
DEFAULT_CANCELING_STATUS = "Canceling..."


class CoordinatorState(StrEnum):
    NOT_STARTED = "not_started"
    STARTED = "started"
    CANCEL_PENDING = "cancel_pending"
    FINISHED = "finished"


class Coordinator:
    """
    Runs one Task and reports whether it completed normally.

    A Coordinator is single-use: create it right before exec() and drop it
    afterwards. Cancel signals (cancel control, window close) must be
    delivered on the loop thread; use request_cancel_threadsafe() from
    anywhere else.
    """

    def __init__(
        self,
        view: ProgressView | None = None,
        *,
        initial_status: str = DEFAULT_INITIAL_STATUS,
        canceling_status: str = DEFAULT_CANCELING_STATUS,
        coalesce_progress: bool = True,
    ) -> None:
        self._view = view
        self._initial_status = initial_status
        self._canceling_status = canceling_status
        self._coalesce_progress = coalesce_progress

        self.state = CoordinatorState.NOT_STARTED
        self.task: Task | None = None

        # Visible state (mirrored into the view, if any).
        self.status = initial_status
        self.progress = 0
        self.cancel_button_enabled = True
        self.closing = False

        # None until FINISHED, then True ("completed normally") or False ("canceled").
        self.completed_normally: bool | None = None

        self._cancel_before_start = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._done: asyncio.Future[bool] | None = None

    # ---- caller side ----

    async def exec(self, task: Task) -> bool:
        """
        Start `task` and wait until it has stopped.

        Returns True if the task was never asked to cancel, False otherwise.
        A work function that threw still counts as completed; check task.error.
        """
        if self.state is not CoordinatorState.NOT_STARTED:
            raise RuntimeError("Coordinator.exec() may only be called once")

        loop = asyncio.get_running_loop()
        self._loop = loop
        self._done = loop.create_future()
        self.task = task

        channel = NotificationChannel(
            loop,
            self._on_notification,
            coalesce_progress=self._coalesce_progress,
        )
        unsubscribe = task.subscribe(channel.publish)
        try:
            self.state = CoordinatorState.STARTED
            self._show_status(self._initial_status)
            self._show_progress(0)

            if self._cancel_before_start:
                # Never started, so there is no work code to wait for.
                logger.info("Task %r canceled before start", task.name)
                task.request_cancel()
                self._finish(completed=False)
            else:
                logger.debug("Starting task %r", task.name)
                task.start()

            return await self._wait_for_stop(self._done)
        finally:
            unsubscribe()
            channel.close()

    async def _wait_for_stop(self, done: asyncio.Future[bool]) -> bool:
        try:
            return await asyncio.shield(done)
        except asyncio.CancelledError:
            # The work may still touch shared state: stop it and wait before unwinding.
            logger.info("exec() cancelled; waiting for the task to stop first")
            self.cancel_requested()
            while not done.done():
                try:
                    await asyncio.shield(done)
                except asyncio.CancelledError:
                    continue
            raise

    # ---- cancel signals (loop thread) ----

    def cancel_requested(self) -> None:
        """React to the cancel control (or anything treated like it)."""
        if self.state is CoordinatorState.FINISHED or not self.cancel_button_enabled:
            return

        if self.state is CoordinatorState.NOT_STARTED or self.task is None:
            self._cancel_before_start = True
            return

        task = self.task
        task.request_cancel()

        if not task.is_running():
            logger.debug("Cancel for %r while not running; finishing now", task.name)
            self._finish(completed=False)
            return

        logger.info("Canceling task %r; waiting for its work to stop", task.name)
        self.state = CoordinatorState.CANCEL_PENDING
        self._show_status(self._canceling_status)
        self._set_cancel_enabled(False)

    def window_closed(self) -> None:
        """Closing the progress window is the same as pressing Cancel."""
        self.cancel_requested()

    def request_cancel_threadsafe(self) -> None:
        """Deliver a cancel signal from any thread (e.g. a signal handler)."""
        loop = self._loop
        if loop is None:
            self._cancel_before_start = True
            return
        try:
            loop.call_soon_threadsafe(self.cancel_requested)
        except RuntimeError:
            logger.debug("Loop closed; cancel signal dropped.")

    # ---- notifications (loop thread) ----

    def _on_notification(self, note: Notification) -> None:
        if self.state is CoordinatorState.FINISHED:
            return

        if isinstance(note, RunningChanged):
            if note.running:
                logger.debug("Task %r: work code running", self.task.name if self.task else "?")
            else:
                self._task_stopped()
        elif isinstance(note, StatusChanged):
            # Keep the canceling indicator until the verdict.
            if self.state is not CoordinatorState.CANCEL_PENDING:
                self._show_status(note.text)
        elif isinstance(note, ProgressChanged):
            self._show_progress(note.percent)

    def _task_stopped(self) -> None:
        task = self.task
        cancelled = task.is_cancelled() if task is not None else False
        self._finish(completed=not cancelled)

    def _finish(self, *, completed: bool) -> None:
        if self.state is CoordinatorState.FINISHED:
            return

        self.state = CoordinatorState.FINISHED
        self.completed_normally = completed
        self.closing = True
        try:
            self._set_cancel_enabled(False)

            name = self.task.name if self.task is not None else "?"
            if completed:
                logger.info("Task %r finished normally", name)
            else:
                logger.info("Task %r was canceled", name)

            self._call_view("close")
        finally:
            if self._done is not None and not self._done.done():
                self._done.set_result(completed)

    # ---- view helpers ----

    def _call_view(self, method: str, *args: object) -> None:
        # A broken view must never stall the state machine.
        if self._view is None:
            return
        try:
            getattr(self._view, method)(*args)
        except Exception:
            logger.exception("Progress view %s%r failed.", method, args)

    def _show_status(self, text: str) -> None:
        self.status = text
        self._call_view("set_status", text)

    def _show_progress(self, percent: int) -> None:
        self.progress = percent
        self._call_view("set_progress", percent)

    def _set_cancel_enabled(self, enabled: bool) -> None:
        if self.cancel_button_enabled == enabled:
            return
        self.cancel_button_enabled = enabled
        self._call_view("set_cancel_enabled", enabled)
