# src/taskwatch/cli/commands.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..core.state import AppState
from ..errors import InvalidInputError
from ..tasks.task import Task
from .demo import make_counting_work, parse_ms_per_tick

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /start, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - quit")
        return "\n".join(lines)


registry = CommandRegistry()


def describe_outcome(task: Task, completed: bool) -> str:
    if not completed:
        return "Task was canceled."
    if task.error is not None:
        return f"Task finished normally; computation threw an exception: {task.error!r}"
    return f"Task finished normally; computation returned: {task.result!r}"


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_tick(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return f"Milliseconds per tick: {state.ms_per_tick}"
    try:
        state.ms_per_tick = parse_ms_per_tick(args[0])
    except InvalidInputError as e:
        return str(e)
    return f"Milliseconds per tick set to {state.ms_per_tick}."


def cmd_start(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    # Imported here: console imports this module for the registry.
    from .console import run_task_with_progress

    try:
        ms_per_tick = parse_ms_per_tick(args[0]) if args else state.ms_per_tick
    except InvalidInputError as e:
        logger.info("Rejected /start input: %s", e)
        return str(e)

    settings = state.settings
    task = Task(make_counting_work(ms_per_tick, settings.tick_count), name="counting")
    state.last_task = task

    if emit is not None:
        emit(f"Starting task ({ms_per_tick} ms per tick). Press Ctrl+C to cancel.")
    logger.info("startTask: starting new task (ms_per_tick=%d)", ms_per_tick)

    completed = asyncio.run(run_task_with_progress(task, settings))

    state.last_outcome = describe_outcome(task, completed)
    logger.info("startTask: %s", state.last_outcome)
    return state.last_outcome


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return (
        "Status:\n"
        f"  ms per tick: {state.ms_per_tick}\n"
        f"  ticks per task: {state.settings.tick_count}\n"
        f"  last outcome: {state.last_outcome}"
    )


registry.register("help", cmd_help, "list commands", aliases=["h", "?"])
registry.register("start", cmd_start, "run the counting task: /start [ms_per_tick]", aliases=["run"])
registry.register("tick", cmd_tick, "show or set milliseconds per tick: /tick [ms]")
registry.register("status", cmd_status, "show settings and the last outcome")
