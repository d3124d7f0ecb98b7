# src/quicktask/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class TaskFilter(StrEnum):
    """List views offered by the UI layer."""

    ALL = "all"
    TODAY = "today"
    UPCOMING = "upcoming"
    UNPLANNED = "unplanned"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


def _dt_to_str(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _str_to_dt(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if value.tzinfo is not None:
        # stored documents are local wall-clock time; fold offsets into it
        value = value.astimezone().replace(tzinfo=None)
    return value


@dataclass(slots=True)
class TaskItem:
    title: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    note: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    due_date: datetime | None = None
    scheduled_start: datetime | None = None
    duration_minutes: int | None = None
    is_completed: bool = False
    tags: list[str] = field(default_factory=list)

    @property
    def planned_at(self) -> datetime | None:
        """The instant that places this task on the calendar (start wins over due)."""
        return self.scheduled_start or self.due_date

    def to_dict(self) -> dict[str, Any]:
        """Encode for the tasks document (camelCase keys, unset fields omitted)."""
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "note": self.note,
            "createdAt": _dt_to_str(self.created_at),
            "isCompleted": self.is_completed,
            "tags": list(self.tags),
        }
        if self.due_date is not None:
            out["dueDate"] = _dt_to_str(self.due_date)
        if self.scheduled_start is not None:
            out["scheduledStart"] = _dt_to_str(self.scheduled_start)
        if self.duration_minutes is not None:
            out["durationMinutes"] = self.duration_minutes
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TaskItem | None:
        """
        Decode one tasks document entry.

        Returns None for entries without a usable id. Unknown keys are ignored;
        absent or malformed optional fields decode to unset.
        """
        task_id = raw.get("id")
        if not isinstance(task_id, str) or not task_id:
            return None

        duration = raw.get("durationMinutes")
        if isinstance(duration, bool) or not isinstance(duration, int) or duration < 0:
            duration = None

        tags_raw = raw.get("tags")
        tags = [str(t) for t in tags_raw] if isinstance(tags_raw, list) else []

        return cls(
            id=task_id,
            title=str(raw.get("title") or ""),
            note=str(raw.get("note") or ""),
            created_at=_str_to_dt(raw.get("createdAt")) or datetime.now(),
            due_date=_str_to_dt(raw.get("dueDate")),
            scheduled_start=_str_to_dt(raw.get("scheduledStart")),
            duration_minutes=duration,
            is_completed=bool(raw.get("isCompleted", False)),
            tags=tags,
        )
