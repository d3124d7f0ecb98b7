# src/quicktask/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from pathlib import Path
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import (
    format_task_line,
    parse_clock,
    parse_day,
    render_listing,
    resolve_task_ref,
)
from ..tasks.task_models import TaskFilter, TaskItem

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /list, ...)."""

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

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Any other line is imported as a task. /paste imports a multi-line block.")
        return "\n".join(lines)


registry = CommandRegistry()


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = state.task_store
    tasks = store.tasks
    done = sum(1 for t in tasks if t.is_completed)
    save_error = getattr(store, "last_save_error", None)
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({len(tasks) - done} open, {done} completed)\n"
        f"  Keywords: {len(store.keyword_map)}\n"
        f"  Data dir: {getattr(state.settings, 'data_dir', '?')}\n"
        f"  Last save: {'FAILED - ' + save_error if save_error else 'ok'}"
    )


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /list              -> all tasks
    /list today        -> due or scheduled today
    /list upcoming     -> due or scheduled after today
    /list unplanned    -> open tasks without a date
    /list completed    -> completed tasks
    """
    task_filter = TaskFilter.parse(args[0] if args else None)
    tasks = state.task_store.filtered(task_filter)
    return render_listing(state, tasks, f"No tasks ({task_filter.value}).")


def cmd_plan(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/plan [day] -> timeboxed tasks for the day (default today); flags what starts within the hour."""
    store = state.task_store
    now = store.now()
    day = parse_day(" ".join(args), now.date()) if args else now.date()
    if day is None:
        return "Usage: /plan [today|tomorrow|<weekday>|YYYY-MM-DD]"

    def starts_soon(task: TaskItem) -> str | None:
        if task.is_completed:
            return None
        minutes = store.approaching_minutes(task, now)
        return f"starts in {minutes}m" if minutes is not None else None

    tasks = store.day_plan(day)
    header = f"Plan for {day:%a %d %b}:"
    body = render_listing(state, tasks, "No tasks for this day.", annotate=starts_soon)
    return f"{header}\n{body}"


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /done <n|id>"
    task = resolve_task_ref(state, args[0])
    if task is None:
        return f"No task matches {args[0]!r}."
    state.task_store.toggle_task(task.id)
    verb = "Reopened" if task.is_completed else "Completed"
    return f"{verb}: {task.title or '(untitled)'}"


def cmd_rm(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /rm <n|id> [<n|id> ...]"
    ids: list[str] = []
    missing: list[str] = []
    for ref in args:
        task = resolve_task_ref(state, ref)
        if task is None:
            missing.append(ref)
        else:
            ids.append(task.id)
    removed = state.task_store.delete_tasks(ids)
    state.last_listing = [i for i in state.last_listing if i not in ids]
    reply = f"Deleted {removed} task(s)."
    if missing:
        reply += f" Not found: {', '.join(missing)}"
    return reply


def cmd_timebox(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /timebox                               -> unplanned tasks, longest first
    /timebox <n|id> <time> [minutes] [day]  -> schedule a task
    """
    usage = "Usage: /timebox <n|id> <time> [minutes] [day]"
    if not args:
        tasks = state.task_store.unplanned_tasks()
        body = render_listing(state, tasks, "Nothing left to timebox.")
        return f"Unplanned, longest first:\n{body}\n{usage}" if tasks else body
    if len(args) < 2:
        return usage
    task = resolve_task_ref(state, args[0])
    if task is None:
        return f"No task matches {args[0]!r}."

    rest = args[2:]
    duration = task.duration_minutes or 30
    if rest and rest[0].isdigit():
        duration = int(rest[0])
        rest = rest[1:]

    today = state.task_store.now().date()
    day = parse_day(" ".join(rest), today) if rest else today
    if day is None:
        return usage
    start = parse_clock(args[1], day)
    if start is None:
        return f"Cannot read time {args[1]!r}. {usage}"

    state.task_store.schedule_task(task.id, start, duration)
    updated = state.task_store.get_task(task.id) or task
    return f"Scheduled: {format_task_line(updated)}"


def cmd_kw(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /kw                        -> list keyword map
    /kw set <key> <Category>   -> map a word to a category tag
    /kw rm <key>               -> remove a mapping
    """
    store = state.task_store
    sub = args[0].lower() if args else "list"

    if sub == "list":
        mapping = store.keyword_map
        if not mapping:
            return "Keyword map is empty. Use /kw set <key> <Category>."
        lines = ["Keywords:"]
        for key in sorted(mapping):
            lines.append(f"  {key} -> {mapping[key]}")
        return "\n".join(lines)

    if sub == "set" and len(args) >= 3:
        key, category = args[1], " ".join(args[2:])
        store.set_keyword(key, category)
        return f"Mapped {key.lower()} -> {category}"

    if sub in ("rm", "del") and len(args) >= 2:
        if store.remove_keyword(args[1]):
            return f"Removed {args[1].lower()}"
        return f"No mapping for {args[1].lower()}"

    return "Usage: /kw [list] | /kw set <key> <Category> | /kw rm <key>"


def cmd_importfile(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /importfile <path>"
    path = Path(" ".join(args)).expanduser()
    try:
        text = path.read_text("utf-8")
    except OSError as e:
        logger.info("importfile failed path=%s err=%s", path, e)
        return f"Cannot read {path}: {e.strerror or e}"

    if emit is not None:
        emit(f"Importing {path}...")
    created = state.task_store.import_from_text(text)
    return render_listing(state, created, "Nothing to import.")


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/add <text> -> import one line verbatim (useful when it starts with '/')."""
    created = state.task_store.import_from_text(" ".join(args))
    return render_listing(state, created, "Nothing to add.")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task/keyword counts and save status.")
registry.register(
    "list", cmd_list, help_text="List tasks: /list [all|today|upcoming|unplanned|completed].", aliases=["ls"]
)
registry.register("plan", cmd_plan, help_text="Timeboxed tasks for a day: /plan [day].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n|id>.")
registry.register("rm", cmd_rm, help_text="Delete tasks: /rm <n|id> ...", aliases=["del"])
registry.register(
    "timebox",
    cmd_timebox,
    help_text="Schedule a task: /timebox <n|id> <time> [minutes] [day]. No args: list unplanned tasks.",
)
registry.register("kw", cmd_kw, help_text="Keyword map: /kw | /kw set <key> <Category> | /kw rm <key>.")
registry.register("importfile", cmd_importfile, help_text="Import every line of a text file as a task.")
registry.register("add", cmd_add, help_text="Import one line as a task.")
