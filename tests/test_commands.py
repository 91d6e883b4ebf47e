# tests/test_commands.py

from __future__ import annotations

import pytest

from productivity_tracker.cli.commands import (
    LOGIN_REQUIRED,
    CommandRegistry,
    ConsoleSession,
    parse_task_args,
    registry,
)
from productivity_tracker.core.errors import ValidationError


def test_command_registry_routes_3_and_4_params(state) -> None:
    reg = CommandRegistry()
    called = {"h3": 0, "h4": 0}
    notes: list[str] = []

    def h3(state, args, session):
        called["h3"] += 1
        return "h3"

    def h4(state, args, session, emit):
        called["h4"] += 1
        if emit is not None:
            emit("note")
        return "h4"

    reg.register("a", h3, "a")
    reg.register("b", h4, "b", aliases=["bee"])

    session = ConsoleSession()
    assert reg.handle(state, "/a x", session) == "h3"
    assert reg.handle(state, "/BEE y", session, emit=notes.append) == "h4"
    assert called == {"h3": 1, "h4": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    session = ConsoleSession()
    assert reg.handle(state, "hello", session) is None
    assert "Unknown command" in (reg.handle(state, "/nope", session) or "")
    assert "Empty command" in (reg.handle(state, "/", session) or "")


def test_parse_task_args() -> None:
    parsed = parse_task_args("2024-06-10 Write the report !HIGH -- quarterly numbers".split())
    assert parsed == {
        "due_date": "2024-06-10",
        "title": "Write the report",
        "priority": "High",
        "description": "quarterly numbers",
    }

    plain = parse_task_args(["2024-06-10", "Buy", "milk"])
    assert plain["priority"] is None
    assert plain["description"] == ""

    with pytest.raises(ValidationError):
        parse_task_args([])


def test_task_commands_require_login(state) -> None:
    session = ConsoleSession()
    for line in ("/add 2024-06-10 x", "/list", "/today", "/overdue", "/done 1", "/report", "/export", "/remind"):
        assert registry.handle(state, line, session) == LOGIN_REQUIRED
    assert state.notifier.sent == []


def test_signup_add_list_done_flow(state) -> None:
    session = ConsoleSession()

    reply = registry.handle(state, "/signup dana dana@example.com secret1 secret1", session)
    assert "Welcome, dana" in reply
    assert session.logged_in

    reply = registry.handle(state, "/add 2099-01-01 Plan trip !low -- book hotel", session)
    assert reply.startswith("Created:")
    reply = registry.handle(state, "/add 2099-01-02 Pay rent !high", session)
    assert "Pay rent" in reply

    listing = registry.handle(state, "/ls", session)
    lines = [ln for ln in listing.splitlines() if ln.startswith("[")]
    assert "Pay rent" in lines[0]
    assert "Plan trip" in lines[1]
    assert "book hotel" in listing

    task_id = state.task_store.list_tasks(session.user_id)[0].id
    assert registry.handle(state, f"/done {task_id}", session) == f"#{task_id}: Task marked as completed"
    assert registry.handle(state, "/done 9999", session) == "Error: Task not found"

    assert registry.handle(state, "/add 2099-01-01", session) == "Error: Task title is required"
    assert registry.handle(state, "/add tomorrow Thing", session) == "Error: Valid due date is required"


def test_login_logout_whoami(state) -> None:
    registry.handle(state, "/signup erin erin@example.com secret1 secret1", ConsoleSession())

    session = ConsoleSession()
    assert registry.handle(state, "/login erin@example.com wrong", session) == "Error: Invalid email or password"
    assert not session.logged_in

    assert registry.handle(state, "/login erin@example.com secret1", session) == "Logged in as erin."
    assert registry.handle(state, "/whoami", session).startswith("erin (id=")
    assert registry.handle(state, "/logout", session) == "Logged out."
    assert registry.handle(state, "/whoami", session) == "Not logged in."


def test_export_writes_csv(state, tmp_path) -> None:
    session = ConsoleSession()
    registry.handle(state, "/signup fred fred@example.com secret1 secret1", session)

    target = tmp_path / "out" / "report.csv"
    reply = registry.handle(state, f"/export monthly {target}", session)

    assert reply == f"Report saved to {target}"
    content = target.read_text("utf-8")
    assert content.startswith("Productivity Report - Last 30 Days\n")


def test_remind_runs_a_sweep(state, alice, notifier) -> None:
    state.task_store.create_task(alice.id, title="old", due_date="2000-01-01")

    session = ConsoleSession(user_id=alice.id, username=alice.username)
    reply = registry.handle(state, "/remind", session)

    assert reply == "Overdue sweep: 1 found, 1 sent, 0 failed."
    assert [n.recipient for n in notifier.sent] == ["alice@example.com"]
