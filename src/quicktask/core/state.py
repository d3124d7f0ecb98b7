# src/quicktask/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: TaskRepo

    # Ids shown by the last /list or /plan, so "/done 2" refers to what the user saw.
    last_listing: list[str] = field(default_factory=list)
