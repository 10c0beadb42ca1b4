# src/taskwatch/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings, get_settings
from ..tasks.task import Task


@dataclass
class AppState:
    settings: Settings

    # Milliseconds each demo tick sleeps; changed with /tick.
    ms_per_tick: int

    last_task: Task | None = None
    last_outcome: str = "No task has run yet."


def create_initial_state(*, settings: Settings | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    return AppState(settings=settings, ms_per_tick=settings.ms_per_tick)
