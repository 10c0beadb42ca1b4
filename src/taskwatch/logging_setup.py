# src/taskwatch/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME = "taskwatch.log"


class _OwnRecordsFilter(logging.Filter):
    """Console shows every taskwatch record; anything else only from ERROR up."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskwatch" or record.name.startswith("taskwatch."):
            return True
        return record.levelno >= logging.ERROR


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskwatch",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route logs to stderr (own records only) and to <log_dir>/taskwatch.log (all records).

    The thread name is part of every line so the foreground loop and the
    task-<name> worker threads can be told apart. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    console = _handler(logging.StreamHandler(sys.stderr), console_level)
    console.addFilter(_OwnRecordsFilter())
    root.addHandler(console)
    root.addHandler(_handler(logging.FileHandler(str(log_file), encoding="utf-8"), file_level))

    logging.captureWarnings(True)
    return log_file
