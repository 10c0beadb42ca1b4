"""Cooperative cancellation and progress reporting for background tasks."""

from .errors import (
    InvalidInputError,
    TaskAlreadyStartedError,
    TaskCancelledError,
    TaskError,
    TaskNotFinishedError,
    WorkFailedError,
)
from .tasks import (
    Coordinator,
    CoordinatorState,
    Notification,
    NotificationChannel,
    ProgressChanged,
    RunningChanged,
    StatusChanged,
    Task,
)

__version__ = "0.1.0"

__all__ = [
    "Coordinator",
    "CoordinatorState",
    "InvalidInputError",
    "Notification",
    "NotificationChannel",
    "ProgressChanged",
    "RunningChanged",
    "StatusChanged",
    "Task",
    "TaskAlreadyStartedError",
    "TaskCancelledError",
    "TaskError",
    "TaskNotFinishedError",
    "WorkFailedError",
]
