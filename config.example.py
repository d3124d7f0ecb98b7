# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep personal data paths in `.env` (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "QUICKTASK_APP_NAME": "App display name (default: quicktask).",
    "QUICKTASK_LOG_LEVEL": "Console logging level (default: INFO).",
    "QUICKTASK_LOG_TO_FILE": "Write full DEBUG logs to <data_dir>/quicktask.log (true/false, default: true).",
    # Paths (gitignored)
    "QUICKTASK_DATA_DIR": "Local data directory (default: .local/quicktask).",
    "QUICKTASK_TASKS_PATH": "Tasks JSON document (default: <data_dir>/tasks.json).",
    "QUICKTASK_KEYWORDS_PATH": "Keyword map JSON document (default: <data_dir>/keywords.json).",
    # First run
    "QUICKTASK_SEED_KEYWORDS": (
        "Comma separated key=Category pairs applied when the keyword map is empty "
        "(e.g. noori=History,club=Rocketry)."
    ),
}
