# src/taskwatch/errors.py

"""Error taxonomy shared by tasks, the coordinator and the console demo."""

from __future__ import annotations


class TaskError(Exception):
    """Base class for taskwatch errors."""


class TaskAlreadyStartedError(TaskError, RuntimeError):
    """start() was called a second time on the same Task (programming error)."""


class TaskNotFinishedError(TaskError):
    """Task.get() was called before the work function stopped."""


class TaskCancelledError(TaskError):
    """Raised by a work function to unwind once it has observed cancellation."""

    def __init__(self, message: str = "Task was canceled") -> None:
        super().__init__(message)


class WorkFailedError(TaskError):
    """The work function threw; the underlying exception is chained as __cause__."""


class InvalidInputError(TaskError, ValueError):
    """Caller-side validation failed before a Task was constructed."""
