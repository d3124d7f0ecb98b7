# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from quicktask.config import Settings, parse_keyword_pairs


def test_parse_keyword_pairs() -> None:
    pairs = ["Noori=History", " club = Rocketry ", "broken", "=Nope", "empty="]
    assert parse_keyword_pairs(pairs) == {"noori": "History", "club": "Rocketry"}


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "APP_NAME",
        "LOG_LEVEL",
        "LOG_TO_FILE",
        "DATA_DIR",
        "TASKS_PATH",
        "KEYWORDS_PATH",
        "SEED_KEYWORDS",
    ):
        monkeypatch.delenv(f"QUICKTASK_{name}", raising=False)

    s = Settings.from_env()
    assert s.app_name == "quicktask"
    assert s.log_level == "INFO"
    assert s.log_to_file is True
    assert s.data_dir == Path(".local/quicktask")
    assert s.tasks_path == Path(".local/quicktask/tasks.json")
    assert s.keywords_path == Path(".local/quicktask/keywords.json")
    assert s.seed_keywords == {}


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("QUICKTASK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("QUICKTASK_KEYWORDS_PATH", str(tmp_path / "kw" / "map.json"))
    monkeypatch.delenv("QUICKTASK_TASKS_PATH", raising=False)
    monkeypatch.setenv("QUICKTASK_LOG_TO_FILE", "off")
    monkeypatch.setenv("QUICKTASK_SEED_KEYWORDS", "noori=History, club=Rocketry")

    s = Settings.from_env()
    assert s.tasks_path == tmp_path / "tasks.json"
    assert s.keywords_path == tmp_path / "kw" / "map.json"
    assert s.log_to_file is False
    assert s.seed_keywords == {"noori": "History", "club": "Rocketry"}
