# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from taskwatch.core.state import AppState

from .fakes import RecordingProgressView


@pytest.fixture()
def settings() -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the console commands.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskwatch-test",
        log_level="DEBUG",
        ms_per_tick=0,
        tick_count=5,
        initial_status="Working...",
        canceling_status="Canceling...",
        coalesce_progress=True,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return AppState(settings=settings, ms_per_tick=settings.ms_per_tick)


@pytest.fixture()
def view() -> RecordingProgressView:
    return RecordingProgressView()
