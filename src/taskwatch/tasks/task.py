# src/taskwatch/tasks/task.py

"""
Cancelable background task.

A Task wraps one work function and runs it exactly once on its own worker
thread. The work function receives the Task and uses it to report status
and progress and to poll for cancellation:

    def work(task: Task) -> int:
        for i in range(100):
            if task.is_cancelled():
                return -1
            do_step(i)
            task.set_progress(i)
        return 42

Lifecycle:
- running goes False -> True -> False exactly once; a Task cannot be restarted.
- RunningChanged(False) is published after the work function returned or
  threw and after `running` was cleared, on every exit path. It is the only
  reliable "the work code has stopped" signal.
- Cancellation is cooperative: request_cancel() only sets a flag.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable
from typing import Any

from ..errors import (
    TaskAlreadyStartedError,
    TaskCancelledError,
    TaskNotFinishedError,
    WorkFailedError,
)
from .notifications import (
    Notification,
    NotificationCallback,
    ProgressChanged,
    RunningChanged,
    StatusChanged,
)

logger = logging.getLogger(__name__)

WorkFunction = Callable[["Task"], Any]

# How long start() waits for the worker thread to raise the running flag.
_START_HANDSHAKE_TIMEOUT_S = 5.0


class Task:
    """One cancelable unit of background work (see module docstring)."""

    def __init__(self, work: WorkFunction, *, name: str | None = None) -> None:
        self._work = work
        self.name = name or getattr(work, "__name__", "task")

        # Guards every field below.
        self._lock = threading.Lock()
        self._started = False
        self._running = False
        self._stopped = False
        self._cancel_requested = False
        self._status = ""
        self._progress = 0
        self._result: Any = None
        self._error: BaseException | None = None

        self._subscribers: list[NotificationCallback] = []
        self._thread: threading.Thread | None = None

    def __repr__(self) -> str:
        with self._lock:
            return (
                f"Task(name={self.name!r}, running={self._running}, "
                f"stopped={self._stopped}, cancel_requested={self._cancel_requested})"
            )

    # ---- subscription ----

    def subscribe(self, callback: NotificationCallback) -> Callable[[], None]:
        """
        Register `callback` for every notification of this task.

        Callbacks run on the worker thread; hop to another context yourself
        (see NotificationChannel). Returns a function that unsubscribes.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, note: Notification) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(note)
            except Exception:
                logger.exception("Subscriber %r failed for %r", callback, note)

    # ---- lifecycle ----

    def start(self) -> None:
        """
        Spawn the worker thread.

        Returns once the worker has set running=True, so a caller that
        checks is_running() right after start() never sees a stale False.
        """
        with self._lock:
            if self._started:
                raise TaskAlreadyStartedError(f"Task {self.name!r} was already started")
            self._started = True

        ready = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(ready,),
            name=f"task-{self.name}",
            daemon=True,
        )
        self._thread.start()

        if not ready.wait(timeout=_START_HANDSHAKE_TIMEOUT_S):
            logger.warning(
                "Task %r: worker did not report running within %.1fs",
                self.name,
                _START_HANDSHAKE_TIMEOUT_S,
            )

    def _run(self, ready: threading.Event) -> None:
        with self._lock:
            self._running = True
        ready.set()
        logger.debug("Task %r: work started", self.name)
        self._publish(RunningChanged(True))

        result: Any = None
        error: BaseException | None = None
        try:
            result = self._work(self)
        except TaskCancelledError as e:
            # Only an observed cancellation; raised without a request it is a failure.
            if not self.is_cancelled():
                error = e
            logger.debug("Task %r: unwound after cancellation", self.name)
        except Exception as e:
            error = e
            logger.debug("Task %r: work function raised", self.name, exc_info=True)
        except BaseException as e:
            # SystemExit / KeyboardInterrupt: recorded, then left to end the thread.
            error = e
            raise
        finally:
            with self._lock:
                self._running = False
                self._stopped = True
                if error is None:
                    self._result = result
                else:
                    self._error = error
            logger.debug("Task %r: work stopped (cancelled=%s)", self.name, self.is_cancelled())
            self._publish(RunningChanged(False))

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker thread to exit. Returns False on timeout."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout=timeout)
        return not thread.is_alive()

    # ---- cancellation ----

    def request_cancel(self) -> None:
        """
        Ask the work function to stop. Non-blocking and idempotent.

        Before start() the flag is kept, so the first poll sees it.
        After the work stopped this is a no-op.
        """
        with self._lock:
            if self._stopped or self._cancel_requested:
                return
            self._cancel_requested = True
        logger.debug("Task %r: cancel requested", self.name)

    def is_cancelled(self) -> bool:
        with self._lock:
            return self._cancel_requested

    def raise_if_cancelled(self) -> None:
        """Raise TaskCancelledError if cancellation was requested."""
        if self.is_cancelled():
            raise TaskCancelledError()

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def started(self) -> bool:
        with self._lock:
            return self._started

    @property
    def stopped(self) -> bool:
        with self._lock:
            return self._stopped

    # ---- reporting (work function only) ----

    def _require_worker_thread(self, what: str) -> None:
        if threading.current_thread() is not self._thread:
            raise RuntimeError(f"{what} may only be called from the work function of {self.name!r}")

    @property
    def status(self) -> str:
        with self._lock:
            return self._status

    def set_status(self, text: str) -> None:
        self._require_worker_thread("set_status()")
        text = str(text)
        with self._lock:
            if text == self._status:
                return
            self._status = text
        self._publish(StatusChanged(text))

    @property
    def progress(self) -> int:
        with self._lock:
            return self._progress

    def set_progress(self, percent: int) -> None:
        """Set progress in [0,100]; out-of-range values are clamped."""
        self._require_worker_thread("set_progress()")
        percent = max(0, min(100, int(percent)))
        with self._lock:
            if percent == self._progress:
                return
            self._progress = percent
        self._publish(ProgressChanged(percent))

    set_progress_percent = set_progress

    def set_progress_fraction(self, fraction: float) -> None:
        """Set progress in [0,1]."""
        self.set_progress(math.floor(fraction * 100))

    # ---- outcome ----

    @property
    def result(self) -> Any:
        """Return value of the work function; None until it stopped (or if it failed)."""
        with self._lock:
            return self._result

    @property
    def error(self) -> BaseException | None:
        """Exception thrown by the work function, if any."""
        with self._lock:
            return self._error

    def get(self) -> Any:
        with self._lock:
            stopped, result, error = self._stopped, self._result, self._error
        if not stopped:
            raise TaskNotFinishedError(f"Task {self.name!r} has not finished")
        if error is not None:
            raise WorkFailedError(f"Task {self.name!r} failed: {error}") from error
        return result
