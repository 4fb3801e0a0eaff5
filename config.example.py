# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "QUADFLOW_APP_NAME": "App display name (default: quadflow).",
    "QUADFLOW_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Switches
    "QUADFLOW_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    "QUADFLOW_PERSIST_ENABLED": "Persist tasks to SQLite (true/false, default: true).",
    # Paths (gitignored)
    "QUADFLOW_DATA_DIR": "Local data directory (default: .local/quadflow).",
    "QUADFLOW_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Engine tuning
    "QUADFLOW_MAINTENANCE_INTERVAL_SECONDS": "Expiry sweep + stats refresh interval (default: 300).",
    "QUADFLOW_EXPIRY_HOURS": "Tasks older than this (by creation time) are swept (default: 24).",
    "QUADFLOW_TITLE_MAX_LENGTH": "Max title length accepted by the console (default: 100).",
}
