# src/quicktask/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the UI layer.

Commands and connectors depend on this Protocol rather than on TaskStore, so a
fake repo can stand in for the JSON store in tests.
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from typing import Any, Protocol


class TaskRepo(Protocol):
    # Read accessors
    @property
    def tasks(self) -> tuple[Any, ...]: ...
    @property
    def keyword_map(self) -> Mapping[str, str]: ...
    def get_task(self, task_id: str) -> Any | None: ...
    def count_tasks(self) -> int: ...
    def now(self) -> datetime: ...

    # CRUD
    def add_task(self, task: Any) -> Any: ...
    def toggle_task(self, task_id: str) -> bool: ...
    def update_task(self, task: Any) -> bool: ...
    def delete_tasks(self, task_ids: Iterable[str]) -> int: ...
    def schedule_task(self, task_id: str, start: datetime, duration_minutes: int | None) -> bool: ...

    # Keyword map
    def set_keyword(self, key: str, category: str) -> None: ...
    def remove_keyword(self, key: str) -> bool: ...

    # Import and views
    def import_from_text(self, text: str, now: datetime | None = None) -> list[Any]: ...
    def filtered(self, task_filter: Any = ..., now: datetime | None = None) -> list[Any]: ...
    def day_plan(self, day: date) -> list[Any]: ...
    def unplanned_tasks(self) -> list[Any]: ...
    def approaching_minutes(self, task: Any, now: datetime) -> int | None: ...

    # Change notification
    def subscribe(self, listener: Callable[[Any], None]) -> Callable[[], None]: ...
