# src/quicktask/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..importer.pipeline import make_context, parse_line_with, split_lines
from .task_models import TaskFilter, TaskItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreChange:
    """What changed: kind is add/toggle/update/delete/schedule/keywords."""

    kind: str
    task_ids: tuple[str, ...] = ()


ChangeListener = Callable[[StoreChange], None]


def _copy(task: TaskItem) -> TaskItem:
    return replace(task, tags=list(task.tags))


class TaskStore:
    """
    JSON task store.

    Two independent documents:
    - tasks.json: list of task objects (newest first)
    - keywords.json: keyword -> category map

    Each document is rewritten in full after every mutation that touches it
    (temp file + os.replace). Read and write failures are logged and never raised:
    a failed load leaves the collection empty, a failed save keeps the change in
    memory and records it in `last_save_error`.

    Thread-safety:
    - none; the owner serializes calls (the console loop runs everything on one thread)
    """

    def __init__(
        self,
        tasks_path: str | Path = "tasks.json",
        keywords_path: str | Path | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._tasks_path = Path(tasks_path)
        self._keywords_path = (
            Path(keywords_path) if keywords_path else self._tasks_path.with_name("keywords.json")
        )
        self._clock = clock

        self._tasks: list[TaskItem] = []
        self._keywords: dict[str, str] = {}
        self._listeners: list[ChangeListener] = []
        self.last_save_error: str | None = None

        for p in (self._tasks_path, self._keywords_path):
            with contextlib.suppress(OSError):
                p.parent.mkdir(parents=True, exist_ok=True)

        self._load_tasks()
        self._load_keywords()
        logger.info(
            "TaskStore ready tasks=%s keywords=%s total=%s",
            self._tasks_path,
            self._keywords_path,
            len(self._tasks),
        )

    # ---- persistence ----

    @staticmethod
    def _read_json(path: Path) -> Any | None:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Failed to load %s; keeping current state.", path, exc_info=True)
            return None

    def _write_json(self, path: Path, data: Any) -> bool:
        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to save %s; change kept in memory only.", path, exc_info=True)
            self.last_save_error = f"{path}: {e}"
            with contextlib.suppress(OSError):
                tmp.unlink()
            return False
        self.last_save_error = None
        return True

    def _load_tasks(self) -> None:
        data = self._read_json(self._tasks_path)
        if data is None:
            return
        if not isinstance(data, list):
            logger.warning("Tasks document %s is not a list; ignoring it.", self._tasks_path)
            return

        loaded: list[TaskItem] = []
        for raw in data:
            task = TaskItem.from_dict(raw) if isinstance(raw, dict) else None
            if task is not None:
                loaded.append(task)
        skipped = len(data) - len(loaded)
        if skipped:
            logger.warning("Skipped %d malformed task entries in %s", skipped, self._tasks_path)
        self._tasks = loaded

    def _load_keywords(self) -> None:
        data = self._read_json(self._keywords_path)
        if data is None:
            return
        if not isinstance(data, dict):
            logger.warning("Keywords document %s is not an object; ignoring it.", self._keywords_path)
            return
        self._keywords = {
            str(k).lower(): str(v) for k, v in data.items() if str(k).strip() and v is not None
        }

    def _save_tasks(self) -> bool:
        return self._write_json(self._tasks_path, [t.to_dict() for t in self._tasks])

    def _save_keywords(self) -> bool:
        return self._write_json(self._keywords_path, dict(self._keywords))

    # ---- change notification ----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener called after each mutation; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, kind: str, task_ids: Iterable[str] = ()) -> None:
        change = StoreChange(kind=kind, task_ids=tuple(task_ids))
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Store listener failed for change=%s", change)

    # ---- read accessors ----

    @property
    def tasks(self) -> tuple[TaskItem, ...]:
        return tuple(_copy(t) for t in self._tasks)

    @property
    def keyword_map(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self._keywords))

    def count_tasks(self) -> int:
        return len(self._tasks)

    def now(self) -> datetime:
        """Reference time for imports and views (the injected clock)."""
        return self._clock()

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def get_task(self, task_id: str) -> TaskItem | None:
        i = self._index_of(task_id)
        return _copy(self._tasks[i]) if i is not None else None

    # ---- task mutations ----

    def add_task(self, task: TaskItem) -> TaskItem:
        stored = _copy(task)
        self._tasks.insert(0, stored)
        self._save_tasks()
        logger.debug("Task added id=%s title=%r", stored.id, stored.title)
        self._notify("add", (stored.id,))
        return _copy(stored)

    def toggle_task(self, task_id: str) -> bool:
        i = self._index_of(task_id)
        if i is None:
            logger.debug("toggle_task: unknown id=%s", task_id)
            return False
        task = self._tasks[i]
        task.is_completed = not task.is_completed
        self._save_tasks()
        self._notify("toggle", (task_id,))
        return True

    def update_task(self, task: TaskItem) -> bool:
        i = self._index_of(task.id)
        if i is None:
            logger.debug("update_task: unknown id=%s", task.id)
            return False
        self._tasks[i] = _copy(task)
        self._save_tasks()
        self._notify("update", (task.id,))
        return True

    def delete_tasks(self, task_ids: Iterable[str]) -> int:
        doomed = set(task_ids)
        removed = [t.id for t in self._tasks if t.id in doomed]
        if not removed:
            return 0
        self._tasks = [t for t in self._tasks if t.id not in doomed]
        self._save_tasks()
        self._notify("delete", removed)
        return len(removed)

    def delete_at(self, indices: Iterable[int]) -> int:
        """Delete by position in the current task order; out-of-range positions are ignored."""
        ids = [self._tasks[i].id for i in set(indices) if 0 <= i < len(self._tasks)]
        return self.delete_tasks(ids)

    def schedule_task(self, task_id: str, start: datetime, duration_minutes: int | None) -> bool:
        """Timebox an existing task: set its start and duration, drop its due date."""
        if duration_minutes is not None and duration_minutes < 0:
            raise ValueError("duration_minutes must be >= 0")
        i = self._index_of(task_id)
        if i is None:
            return False
        task = self._tasks[i]
        task.scheduled_start = start
        task.duration_minutes = duration_minutes
        task.due_date = None
        self._save_tasks()
        self._notify("schedule", (task_id,))
        return True

    # ---- keyword map ----

    def set_keyword(self, key: str, category: str) -> None:
        norm = (key or "").strip().lower()
        if not norm:
            raise ValueError("keyword is required")
        if not category or not category.strip():
            raise ValueError("category is required")
        self._keywords[norm] = category.strip()
        self._save_keywords()
        self._notify("keywords")

    def remove_keyword(self, key: str) -> bool:
        norm = (key or "").strip().lower()
        if norm not in self._keywords:
            return False
        del self._keywords[norm]
        self._save_keywords()
        self._notify("keywords")
        return True

    # ---- import ----

    def import_from_text(self, text: str, now: datetime | None = None) -> list[TaskItem]:
        """
        Turn a block of notes into tasks, one per non-blank line.

        Every task is added (and persisted) on its own, so an interruption keeps the
        lines already imported.
        """
        ctx = make_context(self._keywords, now or self._clock())
        lines = split_lines(text)
        created: list[TaskItem] = []
        for line in lines:
            task = parse_line_with(line, ctx)
            if task is not None:
                created.append(self.add_task(task))
        logger.info("Imported %d tasks from %d lines", len(created), len(lines))
        return created

    # ---- views ----

    def filtered(self, task_filter: TaskFilter = TaskFilter.ALL, now: datetime | None = None) -> list[TaskItem]:
        today = (now or self._clock()).date()

        def keep(t: TaskItem) -> bool:
            planned = t.planned_at
            if task_filter is TaskFilter.COMPLETED:
                return t.is_completed
            if task_filter is TaskFilter.ALL:
                return True
            if t.is_completed:
                return False
            if task_filter is TaskFilter.UNPLANNED:
                return planned is None
            if planned is None:
                return False
            if task_filter is TaskFilter.TODAY:
                return planned.date() == today
            return planned.date() > today

        return [_copy(t) for t in self._tasks if keep(t)]

    def day_plan(self, day: date) -> list[TaskItem]:
        """Tasks timeboxed on `day`, earliest start first."""
        planned = [
            t for t in self._tasks if t.scheduled_start is not None and t.scheduled_start.date() == day
        ]
        planned.sort(key=lambda t: t.scheduled_start or datetime.min)
        return [_copy(t) for t in planned]

    def unplanned_tasks(self) -> list[TaskItem]:
        """Open tasks without a timebox, longest first."""
        out = [t for t in self._tasks if t.scheduled_start is None and not t.is_completed]
        out.sort(key=lambda t: t.duration_minutes or 0, reverse=True)
        return [_copy(t) for t in out]

    @staticmethod
    def approaching_minutes(task: TaskItem, now: datetime) -> int | None:
        """Minutes until start when the task starts within the next hour."""
        start = task.scheduled_start
        if start is None or start <= now:
            return None
        minutes = round((start - now).total_seconds() / 60.0)
        return minutes if minutes <= 60 else None
