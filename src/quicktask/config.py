# src/quicktask/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every path lives under a local data directory unless overridden.
- Nothing is read from disk at import time except the optional .env file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "QUICKTASK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def parse_keyword_pairs(pairs: list[str]) -> dict[str, str]:
    """["noori=History", "club = Rocketry"] -> {"noori": "History", "club": "Rocketry"}"""
    out: dict[str, str] = {}
    for pair in pairs:
        key, sep, category = pair.partition("=")
        if not sep or not key.strip() or not category.strip():
            continue
        out[key.strip().lower()] = category.strip()
    return out


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_path: Path
    keywords_path: Path

    # ---- First-run keyword map ----
    seed_keywords: dict[str, str]

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "quicktask")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/quicktask"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")
        keywords_path = _env_path(_k("KEYWORDS_PATH"), data_dir / "keywords.json")

        seed_keywords = parse_keyword_pairs(_env_list(_k("SEED_KEYWORDS"), []))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            tasks_path=tasks_path,
            keywords_path=keywords_path,
            seed_keywords=seed_keywords,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
