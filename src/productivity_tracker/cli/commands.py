# src/productivity_tracker/cli/commands.py

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

from ..accounts import auth
from ..core.errors import StoreError, ValidationError
from ..core.state import AppState
from ..reminders.overdue_scanner import sweep_overdue_tasks
from ..reports.formatter import render_text
from ..tasks import task_api
from ..tasks.task_models import Priority

logger = logging.getLogger(__name__)


@dataclass
class ConsoleSession:
    """Who is acting in this console. Passed explicitly to every handler."""

    user_id: int | None = None
    username: str | None = None

    @property
    def logged_in(self) -> bool:
        return self.user_id is not None


CommandEmitter = Callable[[str], None]
CommandHandler3 = Callable[[AppState, list[str], ConsoleSession], str]
CommandHandler4 = Callable[[AppState, list[str], ConsoleSession, CommandEmitter | None], str]
CommandHandler = CommandHandler3 | CommandHandler4


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, /report, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        session: ConsoleSession,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 4

        if nparams >= 4:
            h4 = cast(CommandHandler4, handler)
            return h4(state, args, session, emit)

        h3 = cast(CommandHandler3, handler)
        return h3(state, args, session)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()

LOGIN_REQUIRED = "Please /login (or /signup) first."


def _today():
    return datetime.now(UTC).date()


def _format_task(t: dict[str, Any], today_iso: str | None = None) -> str:
    mark = "x" if t["is_completed"] else " "
    late = ""
    if today_iso and not t["is_completed"] and t["due_date"] < today_iso:
        late = "  (overdue)"
    line = f"[{mark}] #{t['id']} {t['priority']:<6} due {t['due_date']}  {t['title']}{late}"
    if t.get("description"):
        line += f"\n      {t['description']}"
    return line


def _format_list(title: str, tasks: list[dict[str, Any]]) -> str:
    if not tasks:
        return f"{title}: nothing here."
    today_iso = _today().isoformat()
    return "\n".join([f"{title}:"] + [_format_task(t, today_iso) for t in tasks])


def _error_text(resp: task_api.ApiResponse) -> str:
    body = resp.body if isinstance(resp.body, dict) else {}
    return f"Error: {body.get('error', 'request failed')}"


def parse_task_args(args: list[str]) -> dict[str, Any]:
    """
    Parse "<due_date> <title words...> [!priority] [-- description words...]".

    Example: 2024-06-10 Write report !high -- quarterly numbers
    """
    if not args:
        raise ValidationError("Valid due date is required")

    due = args[0]
    rest = args[1:]
    description = ""
    if "--" in rest:
        idx = rest.index("--")
        description = " ".join(rest[idx + 1:])
        rest = rest[:idx]

    priority = None
    title_words: list[str] = []
    for word in rest:
        if word.startswith("!") and len(word) > 1:
            priority = Priority.normalize(word[1:])
        else:
            title_words.append(word)

    return {
        "due_date": due,
        "title": " ".join(title_words),
        "priority": priority,
        "description": description,
    }


# ---- account commands ----


def cmd_help(state: AppState, args: list[str], session: ConsoleSession) -> str:
    return registry.build_help()


def cmd_signup(state: AppState, args: list[str], session: ConsoleSession) -> str:
    """/signup <username> <email> <password> <confirm_password>"""
    if len(args) != 4:
        return "Usage: /signup <username> <email> <password> <confirm_password>"
    username, email, password, confirm = args
    try:
        user = auth.signup(state, username=username, email=email, password=password, confirm_password=confirm)
    except ValidationError as e:
        return f"Error: {e}"
    except StoreError:
        logger.exception("Signup failed")
        return "Error creating user account."

    session.user_id = user.id
    session.username = user.username
    return f"Welcome, {user.username}! You are now logged in."


def cmd_login(state: AppState, args: list[str], session: ConsoleSession) -> str:
    """/login <email> <password>"""
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    try:
        user = auth.login(state, email=args[0], password=args[1])
    except ValidationError as e:
        return f"Error: {e}"
    except StoreError:
        logger.exception("Login failed")
        return "Database error occurred."

    session.user_id = user.id
    session.username = user.username
    return f"Logged in as {user.username}."


def cmd_logout(state: AppState, args: list[str], session: ConsoleSession) -> str:
    if not session.logged_in:
        return "You are not logged in."
    session.user_id = None
    session.username = None
    return "Logged out."


def cmd_whoami(state: AppState, args: list[str], session: ConsoleSession) -> str:
    if not session.logged_in:
        return "Not logged in."
    return f"{session.username} (id={session.user_id})"


# ---- task commands ----


def cmd_add(state: AppState, args: list[str], session: ConsoleSession) -> str:
    """/add <due_date> <title...> [!high|!medium|!low] [-- description]"""
    if not session.logged_in:
        return LOGIN_REQUIRED
    try:
        payload = parse_task_args(args)
    except ValidationError as e:
        return f"Error: {e}"
    resp = task_api.create_task(state, cast(int, session.user_id), payload)
    if not resp.ok:
        return _error_text(resp)
    return "Created:\n" + _format_task(resp.body)


def cmd_list(state: AppState, args: list[str], session: ConsoleSession) -> str:
    if not session.logged_in:
        return LOGIN_REQUIRED
    resp = task_api.list_tasks(state, cast(int, session.user_id))
    return _format_list("Your tasks", resp.body) if resp.ok else _error_text(resp)


def cmd_today(state: AppState, args: list[str], session: ConsoleSession) -> str:
    if not session.logged_in:
        return LOGIN_REQUIRED
    resp = task_api.today_tasks(state, cast(int, session.user_id))
    return _format_list("Due today", resp.body) if resp.ok else _error_text(resp)


def cmd_overdue(state: AppState, args: list[str], session: ConsoleSession) -> str:
    if not session.logged_in:
        return LOGIN_REQUIRED
    resp = task_api.overdue_tasks(state, cast(int, session.user_id))
    return _format_list("Overdue", resp.body) if resp.ok else _error_text(resp)


def cmd_range(state: AppState, args: list[str], session: ConsoleSession) -> str:
    """/range <start_date> <end_date>"""
    if not session.logged_in:
        return LOGIN_REQUIRED
    start = args[0] if len(args) > 0 else None
    end = args[1] if len(args) > 1 else None
    resp = task_api.tasks_in_range(state, cast(int, session.user_id), start, end)
    return _format_list(f"Due {start} .. {end}", resp.body) if resp.ok else _error_text(resp)


def cmd_show(state: AppState, args: list[str], session: ConsoleSession) -> str:
    if not session.logged_in:
        return LOGIN_REQUIRED
    if len(args) != 1:
        return "Usage: /show <id>"
    resp = task_api.get_task(state, cast(int, session.user_id), args[0])
    if not resp.ok:
        return _error_text(resp)
    t = resp.body
    completed = t["completed_at"] or "-"
    return f"{_format_task(t, _today().isoformat())}\n      created {t['created_at']}, completed {completed}"


def cmd_edit(state: AppState, args: list[str], session: ConsoleSession) -> str:
    """/edit <id> <due_date> <title...> [!priority] [-- description]"""
    if not session.logged_in:
        return LOGIN_REQUIRED
    if len(args) < 2:
        return "Usage: /edit <id> <due_date> <title...> [!priority] [-- description]"
    try:
        payload = parse_task_args(args[1:])
    except ValidationError as e:
        return f"Error: {e}"
    resp = task_api.update_task(state, cast(int, session.user_id), args[0], payload)
    if not resp.ok:
        return _error_text(resp)
    return "Updated:\n" + _format_task(resp.body)


def cmd_done(state: AppState, args: list[str], session: ConsoleSession) -> str:
    """/done <id> toggles completion."""
    if not session.logged_in:
        return LOGIN_REQUIRED
    if len(args) != 1:
        return "Usage: /done <id>"
    resp = task_api.toggle_task(state, cast(int, session.user_id), args[0])
    if not resp.ok:
        return _error_text(resp)
    return f"#{resp.body['id']}: {resp.body['message']}"


def cmd_delete(state: AppState, args: list[str], session: ConsoleSession) -> str:
    if not session.logged_in:
        return LOGIN_REQUIRED
    if len(args) != 1:
        return "Usage: /delete <id>"
    resp = task_api.delete_task(state, cast(int, session.user_id), args[0])
    if not resp.ok:
        return _error_text(resp)
    return f"#{resp.body['deletedId']}: {resp.body['message']}"


# ---- reports ----


def cmd_report(state: AppState, args: list[str], session: ConsoleSession) -> str:
    """/report [daily|weekly|monthly]"""
    if not session.logged_in:
        return LOGIN_REQUIRED
    period = args[0] if args else None
    try:
        report = task_api.build_assembler(state).build(cast(int, session.user_id), period, today=_today())
    except StoreError:
        logger.exception("Report failed")
        return "Error: Database error"
    return render_text(report)


def cmd_export(
    state: AppState,
    args: list[str],
    session: ConsoleSession,
    emit: CommandEmitter | None = None,
) -> str:
    """/export [period] [path] writes the CSV report."""
    if not session.logged_in:
        return LOGIN_REQUIRED
    period = args[0] if args else None
    resp = task_api.report_csv(state, cast(int, session.user_id), period)
    if not resp.ok:
        return _error_text(resp)

    if len(args) > 1:
        target = Path(args[1]).expanduser()
    else:
        target = Path(getattr(state.settings, "data_dir", ".")) / resp.body["filename"]

    if emit:
        with contextlib.suppress(Exception):
            emit(f"Writing {target} ...")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(resp.body["content"], "utf-8")
    except OSError as e:
        logger.warning("CSV export to %s failed: %r", target, e)
        return f"Error: cannot write {target}: {e}"
    return f"Report saved to {target}"


def cmd_remind(
    state: AppState,
    args: list[str],
    session: ConsoleSession,
    emit: CommandEmitter | None = None,
) -> str:
    """/remind runs one overdue sweep now (all users). Operator command, login required."""
    if not session.logged_in:
        return LOGIN_REQUIRED
    if emit:
        with contextlib.suppress(Exception):
            emit("Running overdue sweep...")

    coro = sweep_overdue_tasks(state.task_store, state.notifier, as_of=_today())
    loop = state.loop
    try:
        if loop is not None and loop.is_running():
            result = asyncio.run_coroutine_threadsafe(coro, loop).result(timeout=120)
        else:
            result = asyncio.run(coro)
    except StoreError:
        logger.exception("Manual overdue sweep failed")
        return "Error: Database error"

    return f"Overdue sweep: {result.found} found, {result.sent} sent, {result.failed} failed."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("signup", cmd_signup, help_text="Create an account: /signup <username> <email> <pw> <pw>.")
registry.register("login", cmd_login, help_text="Log in: /login <email> <password>.")
registry.register("logout", cmd_logout, help_text="Log out.")
registry.register("whoami", cmd_whoami, help_text="Show the logged-in user.")
registry.register(
    "add", cmd_add, help_text="Add a task: /add <YYYY-MM-DD> <title> [!high|!low] [-- description]."
)
registry.register("list", cmd_list, help_text="Dashboard: all tasks by priority and due date.", aliases=["ls"])
registry.register("today", cmd_today, help_text="Tasks due today.")
registry.register("overdue", cmd_overdue, help_text="Open tasks past their due date.")
registry.register("range", cmd_range, help_text="Tasks due in a range: /range <start> <end>.")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("edit", cmd_edit, help_text="Replace a task: /edit <id> <YYYY-MM-DD> <title> [!prio] [-- desc].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("report", cmd_report, help_text="Productivity report: /report [daily|weekly|monthly].")
registry.register("export", cmd_export, help_text="Save the report as CSV: /export [period] [path].")
registry.register("remind", cmd_remind, help_text="Send overdue reminders to all users now (operator).")
