# src/quicktask/tasks/task_api.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, time

from ..core.state import AppState
from ..importer.dates import ClockToken, clock_pattern, find_relative_day, find_weekday
from .task_models import TaskItem

logger = logging.getLogger(__name__)

_CLOCK_FULL_RE = re.compile(clock_pattern("t"), re.IGNORECASE)


def resolve_task_ref(state: AppState, ref: str) -> TaskItem | None:
    """
    Find a task by what the user typed.

    A number is a 1-based position in the last listing (store order when nothing was
    listed yet); anything else is an id prefix that must match exactly one task.
    """
    ref = (ref or "").strip().lower()
    if not ref:
        return None

    store = state.task_store
    if ref.isdigit():
        ids = state.last_listing or [t.id for t in store.tasks]
        pos = int(ref) - 1
        if 0 <= pos < len(ids):
            return store.get_task(ids[pos])
        return None

    matches = [t for t in store.tasks if t.id.lower().startswith(ref)]
    if len(matches) > 1:
        logger.debug("Ambiguous task ref=%s (%d matches)", ref, len(matches))
        return None
    return matches[0] if matches else None


def parse_day(raw: str, today: date) -> date | None:
    """'today', 'tmr', 'fri', 'next mon' or YYYY-MM-DD."""
    text = (raw or "").strip()
    if not text:
        return None
    found = find_relative_day(text, today) or find_weekday(text, today)
    if found is not None and found[1] == (0, len(text)):
        return found[0]
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_clock(raw: str, day: date) -> datetime | None:
    """'14:30', '9am', '3' (PM) on `day`."""
    m = _CLOCK_FULL_RE.fullmatch((raw or "").strip())
    if not m:
        return None
    return ClockToken.from_match(m, "t").on(day)


def format_when(task: TaskItem) -> str:
    if task.scheduled_start is not None:
        return task.scheduled_start.strftime("%a %d %b %H:%M")
    if task.due_date is not None:
        if task.due_date.time() == time.min:
            return "due " + task.due_date.strftime("%a %d %b")
        return "due " + task.due_date.strftime("%a %d %b %H:%M")
    return ""


def format_task_line(task: TaskItem, position: int | None = None, note: str | None = None) -> str:
    parts: list[str] = []
    if position is not None:
        parts.append(f"{position:>2}.")
    parts.append("[x]" if task.is_completed else "[ ]")
    parts.append(task.title or "(untitled)")

    when = format_when(task)
    if when:
        parts.append(f"@ {when}")
    if task.duration_minutes is not None:
        parts.append(f"({task.duration_minutes}m)")
    if task.tags:
        parts.append(" ".join(f"#{t}" for t in task.tags))
    parts.append(f"<{task.id[:8]}>")
    if note:
        parts.append(f"- {note}")
    return " ".join(parts)


def render_listing(
    state: AppState,
    tasks: list[TaskItem],
    empty_text: str,
    annotate: Callable[[TaskItem], str | None] | None = None,
) -> str:
    """Numbered listing; remembers the ids so follow-up commands can use positions."""
    state.last_listing = [t.id for t in tasks]
    if not tasks:
        return empty_text
    return "\n".join(
        format_task_line(t, i, annotate(t) if annotate else None) for i, t in enumerate(tasks, start=1)
    )
