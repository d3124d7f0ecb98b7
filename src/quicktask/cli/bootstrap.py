# src/quicktask/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the JSON task store into AppState,
- seeds the keyword map on first run.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)
    settings.keywords_path.parent.mkdir(parents=True, exist_ok=True)


def seed_keywords(store: TaskStore, seed: dict[str, str]) -> int:
    """Apply configured keyword pairs only when the stored map is still empty."""
    if not seed or store.keyword_map:
        return 0
    for key, category in seed.items():
        store.set_keyword(key, category)
    logger.info("Seeded keyword map with %d entries", len(seed))
    return len(seed)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_path, settings.keywords_path)
    seed_keywords(store, dict(getattr(settings, "seed_keywords", None) or {}))

    return AppState(settings=settings, task_store=store)
