# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from taskwatch.config import Settings


def test_settings_defaults(monkeypatch) -> None:
    for name in ("MS_PER_TICK", "TICK_COUNT", "LOG_DIR", "COALESCE_PROGRESS", "CANCELING_STATUS"):
        monkeypatch.delenv(f"TASKWATCH_{name}", raising=False)

    s = Settings.from_env()
    assert s.ms_per_tick == 30
    assert s.tick_count == 100
    assert s.log_dir == Path(".local/taskwatch")
    assert s.coalesce_progress is True
    assert s.canceling_status == "Canceling..."


def test_settings_from_env_and_bad_values_fall_back(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TASKWATCH_MS_PER_TICK", "5")
    monkeypatch.setenv("TASKWATCH_TICK_COUNT", "zero")
    monkeypatch.setenv("TASKWATCH_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("TASKWATCH_COALESCE_PROGRESS", "off")

    s = Settings.from_env()
    assert s.ms_per_tick == 5
    assert s.tick_count == 100
    assert s.log_dir == tmp_path
    assert s.coalesce_progress is False


def test_negative_tick_values_are_rejected(monkeypatch) -> None:
    monkeypatch.setenv("TASKWATCH_MS_PER_TICK", "-3")
    monkeypatch.setenv("TASKWATCH_TICK_COUNT", "0")

    s = Settings.from_env()
    assert s.ms_per_tick == 30
    assert s.tick_count == 100
