# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets (SMTP / Matrix passwords). Keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TRACKER_APP_NAME": "App display name (default: Productivity Tracker).",
    "TRACKER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Connectors
    "TRACKER_CONSOLE_ENABLED": "Enable console REPL (true/false, default: true).",
    # Paths (gitignored)
    "TRACKER_DATA_DIR": "Local data directory (default: .local/tracker).",
    "TRACKER_DB_PATH": "SQLite database path (default: <data_dir>/tracker.sqlite3).",
    "TRACKER_MATRIX_STORE_PATH": "Matrix session directory (default: <data_dir>/matrix_store).",
    # Overdue scanner
    "TRACKER_SCANNER_ENABLED": "Run the overdue reminder scanner (true/false, default: true).",
    "TRACKER_SCANNER_INTERVAL_SECONDS": "Seconds between sweeps (default: 3600).",
    "TRACKER_NOTIFY_BACKEND": "Reminder backend: log | smtp | matrix (default: log).",
    # SMTP
    "TRACKER_SMTP_HOST": "SMTP relay host (required for the smtp backend).",
    "TRACKER_SMTP_PORT": "SMTP port (default: 587).",
    "TRACKER_SMTP_USER": "SMTP login (empty => no AUTH).",
    "TRACKER_SMTP_PASSWORD": "SMTP password.",
    "TRACKER_SMTP_FROM": "From address (default: TRACKER_SMTP_USER).",
    "TRACKER_SMTP_STARTTLS": "Use STARTTLS (true/false, default: true).",
    # Matrix
    "TRACKER_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "TRACKER_MATRIX_USER_ID": "Matrix user ID (bot).",
    "TRACKER_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "TRACKER_MATRIX_REMINDER_ROOM": "Room ID that receives overdue reminders.",
}
