# src/productivity_tracker/reports/aggregator.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ..core.ports import TaskRepo
from ..tasks.task_models import format_ts, parse_ts


@dataclass(frozen=True, slots=True)
class DailyCount:
    date: date
    count: int


@dataclass(frozen=True, slots=True)
class CompletionSummary:
    total_completed: int
    last_completed: datetime | None
    productive_days: int

    @property
    def average_per_day(self) -> float:
        """Completions per productive day (0.0 when there were none)."""
        if self.productive_days <= 0:
            return 0.0
        return self.total_completed / self.productive_days

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_completed": self.total_completed,
            "last_completed": format_ts(self.last_completed) if self.last_completed else None,
            "productive_days": self.productive_days,
        }


@dataclass(frozen=True, slots=True)
class MostProductiveDay:
    date: date | None
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat() if self.date else None, "count": self.count}


NO_PRODUCTIVE_DAY = MostProductiveDay(date=None, count=0)


def pick_most_productive(counts: list[DailyCount]) -> MostProductiveDay:
    """Highest count wins; on a tie the earliest date wins."""
    best: DailyCount | None = None
    for c in sorted(counts, key=lambda x: x.date):
        if best is None or c.count > best.count:
            best = c
    if best is None:
        return NO_PRODUCTIVE_DAY
    return MostProductiveDay(date=best.date, count=best.count)


class CompletionAggregator:
    """
    Completion analytics over a window [start, end] (inclusive, calendar days).

    A completion belongs to the UTC calendar date of its completed_at stamp.
    Only owner-scoped store queries are used.
    """

    def __init__(self, task_store: TaskRepo) -> None:
        self._store = task_store

    def daily_counts(self, owner_id: int, start: date, end: date) -> list[DailyCount]:
        """Days with at least one completion, ascending. Zero days are absent."""
        rows = self._store.completion_counts_by_day(owner_id, start, end)
        return [DailyCount(date=date.fromisoformat(day), count=int(n)) for day, n in rows if int(n) > 0]

    def summary(self, owner_id: int, start: date, end: date) -> CompletionSummary:
        total, last_raw, productive_days = self._store.completion_totals(owner_id, start, end)
        return CompletionSummary(
            total_completed=int(total),
            last_completed=parse_ts(last_raw),
            productive_days=int(productive_days),
        )

    def most_productive_day(self, owner_id: int, start: date, end: date) -> MostProductiveDay:
        return pick_most_productive(self.daily_counts(owner_id, start, end))
