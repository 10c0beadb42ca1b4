# tests/test_logging_setup.py

from __future__ import annotations

import logging
import threading

import pytest

from taskwatch.logging_setup import setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_log_file_records_thread_name(tmp_path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")

    def emit() -> None:
        logging.getLogger("taskwatch.tasks.task").debug("from worker")

    worker = threading.Thread(target=emit, name="task-demo")
    worker.start()
    worker.join()
    for h in logging.getLogger().handlers:
        h.flush()

    text = log_file.read_text("utf-8")
    assert log_file == tmp_path / "logs" / "taskwatch.log"
    assert "[task-demo] taskwatch.tasks.task: from worker" in text
