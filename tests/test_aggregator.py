# tests/test_aggregator.py

from __future__ import annotations

from datetime import date

from productivity_tracker.reports.aggregator import (
    CompletionAggregator,
    CompletionSummary,
    DailyCount,
    pick_most_productive,
)
from productivity_tracker.tasks.task_store import TaskStore

from .conftest import ts

START = date(2024, 6, 1)
END = date(2024, 6, 7)


def _complete(store: TaskStore, owner_id: int, when, n: int = 1) -> None:
    for i in range(n):
        t = store.create_task(owner_id, title=f"task {when:%d}-{i}", due_date="2024-06-30")
        store.toggle_completion(owner_id, t.id, now=when)


def test_daily_counts_skips_empty_days_and_other_owners(store: TaskStore, alice, bob) -> None:
    _complete(store, alice.id, ts(2024, 6, 2, 9), n=2)
    _complete(store, alice.id, ts(2024, 6, 5, 23, 59))
    _complete(store, alice.id, ts(2024, 5, 31))  # before window
    _complete(store, alice.id, ts(2024, 6, 8))  # after window
    _complete(store, bob.id, ts(2024, 6, 3), n=4)
    store.create_task(alice.id, title="open", due_date="2024-06-03")

    counts = CompletionAggregator(store).daily_counts(alice.id, START, END)
    assert counts == [
        DailyCount(date=date(2024, 6, 2), count=2),
        DailyCount(date=date(2024, 6, 5), count=1),
    ]


def test_reopened_tasks_do_not_count(store: TaskStore, alice) -> None:
    t = store.create_task(alice.id, title="flip", due_date="2024-06-30")
    store.toggle_completion(alice.id, t.id, now=ts(2024, 6, 3))
    store.toggle_completion(alice.id, t.id, now=ts(2024, 6, 3, 13))

    agg = CompletionAggregator(store)
    assert agg.daily_counts(alice.id, START, END) == []
    assert agg.summary(alice.id, START, END).total_completed == 0


def test_summary(store: TaskStore, alice) -> None:
    _complete(store, alice.id, ts(2024, 6, 2, 9), n=3)
    _complete(store, alice.id, ts(2024, 6, 6, 18))

    agg = CompletionAggregator(store)
    summary = agg.summary(alice.id, START, END)

    assert summary.total_completed == 4
    assert summary.productive_days == 2
    assert summary.last_completed == ts(2024, 6, 6, 18)
    assert summary.average_per_day == 2.0
    assert summary.productive_days == len([c for c in agg.daily_counts(alice.id, START, END) if c.count > 0])


def test_summary_empty_window(store: TaskStore, alice) -> None:
    summary = CompletionAggregator(store).summary(alice.id, START, END)
    assert summary == CompletionSummary(total_completed=0, last_completed=None, productive_days=0)
    assert summary.average_per_day == 0.0
    assert summary.to_dict() == {"total_completed": 0, "last_completed": None, "productive_days": 0}


def test_most_productive_day_prefers_earliest_tie(store: TaskStore, alice) -> None:
    _complete(store, alice.id, ts(2024, 6, 1), n=2)
    _complete(store, alice.id, ts(2024, 6, 3), n=5)
    _complete(store, alice.id, ts(2024, 6, 4), n=5)

    best = CompletionAggregator(store).most_productive_day(alice.id, START, END)
    assert best.date == date(2024, 6, 3)
    assert best.count == 5


def test_most_productive_day_empty(store: TaskStore, alice) -> None:
    best = CompletionAggregator(store).most_productive_day(alice.id, START, END)
    assert best.date is None
    assert best.count == 0
    assert best.to_dict() == {"date": None, "count": 0}


def test_pick_most_productive_ignores_input_order() -> None:
    counts = [
        DailyCount(date=date(2024, 6, 3), count=5),
        DailyCount(date=date(2024, 6, 1), count=2),
        DailyCount(date=date(2024, 6, 2), count=5),
    ]
    assert pick_most_productive(counts).date == date(2024, 6, 2)
