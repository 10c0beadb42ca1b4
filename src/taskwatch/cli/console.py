# src/taskwatch/cli/console.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
from datetime import datetime
from typing import TextIO

from ..config import Settings
from ..core.ports import ProgressView
from ..core.state import AppState
from ..tasks.coordinator import Coordinator
from ..tasks.task import Task
from .commands import registry as command_registry

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleProgressView:
    """
    Terminal rendition of a progress dialog.

    On a TTY the status and bar are redrawn in place; otherwise one line is
    printed per status change so logs stay readable.
    """

    def __init__(self, stream: TextIO | None = None, *, width: int = 30) -> None:
        self._stream = stream or sys.stdout
        self._width = max(10, width)
        try:
            self._tty = self._stream.isatty()
        except Exception:
            self._tty = False
        self.status = ""
        self.percent = 0
        self.cancel_enabled = True
        self.closed = False

    def set_status(self, text: str) -> None:
        self.status = text
        if self._tty:
            self._redraw()
        else:
            self._stream.write(f"[{_ts_local()}] {text}\n")
            self._stream.flush()

    def set_progress(self, percent: int) -> None:
        self.percent = percent
        if self._tty:
            self._redraw()

    def set_cancel_enabled(self, enabled: bool) -> None:
        self.cancel_enabled = enabled
        if self._tty:
            self._redraw()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._tty:
            self._stream.write("\n")
        else:
            self._stream.write(f"[{_ts_local()}] {self.status} ({self.percent}%)\n")
        self._stream.flush()

    def _redraw(self) -> None:
        filled = self._width * self.percent // 100
        bar = "#" * filled + "-" * (self._width - filled)
        hint = "  (Ctrl+C to cancel)" if self.cancel_enabled else ""
        self._stream.write(f"\r\033[2K{self.status} [{bar}] {self.percent:3d}%{hint}")
        self._stream.flush()


async def run_task_with_progress(
    task: Task,
    settings: Settings,
    *,
    view: ProgressView | None = None,
) -> bool:
    """
    Run `task` under a Coordinator on the current loop, mapping Ctrl+C to Cancel.

    Returns the coordinator verdict (True = completed normally).
    """
    coordinator = Coordinator(
        view if view is not None else ConsoleProgressView(),
        initial_status=settings.initial_status,
        canceling_status=settings.canceling_status,
        coalesce_progress=settings.coalesce_progress,
    )
    loop = asyncio.get_running_loop()

    on_loop = False
    previous_handler = None
    try:
        loop.add_signal_handler(signal.SIGINT, coordinator.window_closed)
        on_loop = True
    except (NotImplementedError, RuntimeError, ValueError):
        # Windows / non-main thread: fall back to a plain handler that hops onto the loop.
        try:
            previous_handler = signal.signal(
                signal.SIGINT, lambda _signum, _frame: coordinator.request_cancel_threadsafe()
            )
        except ValueError:
            logger.debug("Cannot install SIGINT handler outside the main thread.")

    try:
        return await coordinator.exec(task)
    finally:
        if on_loop:
            with contextlib.suppress(Exception):
                loop.remove_signal_handler(signal.SIGINT)
        elif previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (ms_per_tick=%s).", state.ms_per_tick)
    _print_ts("[CONSOLE] Use /start to run a task, /help for commands, /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Not a command. Use /help to list available commands."
        _print_ts(response)

    logger.info("Console finished.")
