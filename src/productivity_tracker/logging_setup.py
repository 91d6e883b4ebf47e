# src/productivity_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "productivity_tracker"
LOG_FILE_NAME = "tracker.log"

# Minimum console level per logger prefix; the longest matching prefix wins.
# Anything not listed (third-party libraries) needs ERROR.
_CONSOLE_FLOORS: dict[str, int] = {
    PACKAGE_LOGGER: logging.DEBUG,
    # The scanner thread would otherwise print between REPL prompts.
    f"{PACKAGE_LOGGER}.reminders": logging.WARNING,
    "py.warnings": logging.ERROR,
}


def _console_floor(name: str) -> int:
    best = ""
    for prefix in _CONSOLE_FLOORS:
        if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > len(best):
            best = prefix
    return _CONSOLE_FLOORS[best] if best else logging.ERROR


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the interactive console readable; the log file still gets everything."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= _console_floor(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/tracker",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logs to stderr (filtered) and to <log_dir>/tracker.log (full).

    Call once at startup, before the stores are built. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)

    root.addHandler(console)
    root.addHandler(file_handler)
    logging.captureWarnings(True)
    return log_file
