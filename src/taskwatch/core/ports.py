# src/taskwatch/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the coordinator.

The coordinator drives whatever shows progress to the user through this
Protocol, so a terminal renderer, a GUI dialog or a test recorder are
interchangeable.
"""

from typing import Protocol


class ProgressView(Protocol):
    """Visible surface of a running task: status label, progress bar, cancel control."""

    def set_status(self, text: str) -> None: ...
    def set_progress(self, percent: int) -> None: ...
    def set_cancel_enabled(self, enabled: bool) -> None: ...
    def close(self) -> None: ...
