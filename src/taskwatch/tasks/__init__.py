"""
Task subsystem.

Components:
- notifications.py: immutable notifications + NotificationChannel (worker -> loop)
- task.py: Task, one cancelable unit of work on its own thread
- coordinator.py: Coordinator, awaits a Task until its work code has really stopped
"""

from .coordinator import Coordinator, CoordinatorState
from .notifications import (
    Notification,
    NotificationChannel,
    ProgressChanged,
    RunningChanged,
    StatusChanged,
)
from .task import Task, WorkFunction

__all__ = [
    "Coordinator",
    "CoordinatorState",
    "Notification",
    "NotificationChannel",
    "ProgressChanged",
    "RunningChanged",
    "StatusChanged",
    "Task",
    "WorkFunction",
]
