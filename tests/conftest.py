# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from quicktask.core.state import AppState
from quicktask.tasks.task_store import TaskStore

# Tuesday 2024-03-12 09:30 local; every date assertion is relative to this.
REFERENCE_NOW = datetime(2024, 3, 12, 9, 30)


@pytest.fixture()
def now() -> datetime:
    return REFERENCE_NOW


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="quicktask-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.json",
        keywords_path=tmp_path / "keywords.json",
        seed_keywords={},
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    """Real JSON store on tmp paths with a frozen clock."""
    return TaskStore(settings.tasks_path, settings.keywords_path, clock=lambda: REFERENCE_NOW)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store)
