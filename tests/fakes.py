# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from taskwatch.core.ports import ProgressView


@dataclass(slots=True)
class RecordingProgressView(ProgressView):
    """
    Fake ProgressView used by coordinator tests.

    Records every call as (method, value) in order.
    """

    events: list[tuple[str, Any]] = field(default_factory=list)

    def set_status(self, text: str) -> None:
        self.events.append(("status", text))

    def set_progress(self, percent: int) -> None:
        self.events.append(("progress", percent))

    def set_cancel_enabled(self, enabled: bool) -> None:
        self.events.append(("cancel_enabled", enabled))

    def close(self) -> None:
        self.events.append(("close", None))

    def values(self, kind: str) -> list[Any]:
        return [v for k, v in self.events if k == kind]
