# src/quicktask/importer/pipeline.py

"""
Line parser for free-text task import.

A block of notes is split into trimmed, non-empty lines; each line runs through
STAGES in order and becomes exactly one TaskItem. Stages never see text an
earlier stage consumed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType

from ..tasks.task_models import TaskItem
from .dates import local_midnight
from .extractors import (
    Draft,
    ParseContext,
    Stage,
    detect_meeting,
    extract_date,
    extract_duration,
    extract_keywords,
    extract_single_time,
    extract_tags,
    extract_time_range,
)

logger = logging.getLogger(__name__)

STAGES: tuple[Stage, ...] = (
    extract_tags,
    extract_duration,
    extract_date,
    detect_meeting,
    extract_time_range,
    extract_single_time,
    extract_keywords,
)


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def make_context(keywords: Mapping[str, str] | None = None, now: datetime | None = None) -> ParseContext:
    """Freeze a keyword snapshot (lowercase keys) and the reference time for one import."""
    snapshot = {str(k).lower(): str(v) for k, v in (keywords or {}).items()}
    return ParseContext(now=now or datetime.now(), keywords=MappingProxyType(snapshot))


def build_task(title: str, draft: Draft, ctx: ParseContext) -> TaskItem:
    """
    Assemble the final record.

    A resolved clock time becomes scheduled_start and leaves due_date unset; a bare
    date becomes a midnight due_date. Category tags go in front of all other tags.
    """
    due_date = None
    if draft.start is None and draft.day is not None:
        due_date = local_midnight(draft.day)

    return TaskItem(
        title=title,
        created_at=ctx.now,
        due_date=due_date,
        scheduled_start=draft.start,
        duration_minutes=draft.duration_minutes,
        tags=list(draft.category_tags) + list(draft.tags),
    )


def run_stages(line: str, ctx: ParseContext) -> tuple[str, Draft]:
    title, draft = line.strip(), Draft()
    for stage in STAGES:
        title, draft = stage(title, draft, ctx)
    return title, draft


def parse_line_with(line: str, ctx: ParseContext) -> TaskItem | None:
    if not line.strip():
        return None
    title, draft = run_stages(line, ctx)
    task = build_task(title, draft, ctx)
    logger.debug(
        "Parsed line=%r title=%r due=%s start=%s duration=%s tags=%s",
        line,
        task.title,
        task.due_date,
        task.scheduled_start,
        task.duration_minutes,
        task.tags,
    )
    return task


def parse_line(
    line: str,
    keywords: Mapping[str, str] | None = None,
    now: datetime | None = None,
) -> TaskItem | None:
    """Parse one line; blank lines yield None."""
    return parse_line_with(line, make_context(keywords, now))


def parse_text(
    text: str,
    keywords: Mapping[str, str] | None = None,
    now: datetime | None = None,
) -> list[TaskItem]:
    """Parse a block of notes, one task per non-blank line, in input order."""
    ctx = make_context(keywords, now)
    out: list[TaskItem] = []
    for line in split_lines(text):
        task = parse_line_with(line, ctx)
        if task is not None:
            out.append(task)
    return out
