# src/productivity_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the overdue scanner on an asyncio loop in a background thread (optional),
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import threading

from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..reminders.overdue_scanner import run_overdue_scanner
from .bootstrap import attach_matrix_notifier, create_initial_state

logger = logging.getLogger(__name__)


class ScannerThread(threading.Thread):
    """Owns an event loop running the overdue scanner until stop() is called."""

    def __init__(self, state: AppState) -> None:
        super().__init__(name="overdue-scanner", daemon=True)
        self._state = state
        self._loop = asyncio.new_event_loop()
        self._task: asyncio.Task[None] | None = None

    def run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._state.loop = self._loop
        self._task = self._loop.create_task(self._main())
        try:
            with contextlib.suppress(asyncio.CancelledError):
                self._loop.run_until_complete(self._task)
        finally:
            self._state.loop = None
            self._loop.close()

    async def _main(self) -> None:
        # One task covers the Matrix login and the polling loop, so stop()
        # interrupts whichever is running.
        try:
            await attach_matrix_notifier(self._state)
            interval = float(getattr(self._state.settings, "scanner_interval_seconds", 3600.0))
            await run_overdue_scanner(self._state.task_store, self._state.notifier, interval_seconds=interval)
        finally:
            close = getattr(self._state.notifier, "close", None)
            if close is not None:
                try:
                    await close()
                except Exception:
                    logger.debug("Notifier close failed.", exc_info=True)

    def stop(self) -> None:
        def _cancel() -> None:
            if self._task is not None:
                self._task.cancel()

        # Queued even before the loop starts; it then runs ahead of the first step of _main.
        with contextlib.suppress(RuntimeError):
            self._loop.call_soon_threadsafe(_cancel)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logging.getLogger("nio").setLevel(max(console_level, logging.INFO))
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logger.info("Starting %s (log file: %s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    scanner: ScannerThread | None = None
    if settings.scanner_enabled:
        scanner = ScannerThread(state)
        scanner.start()

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError):
        # Not in the main thread, or the platform lacks SIGTERM.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Running the overdue scanner only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        if scanner is not None:
            scanner.stop()
            scanner.join(timeout=10.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
