# src/productivity_tracker/reports/assembler.py

from __future__ import annotations

"""
Report assembly.

Turns aggregator output into a display/export-ready structure:
- picks the window for the requested period,
- zero-fills every calendar day of the window,
- attaches summary and most-productive-day for the same window.

The dict, CSV and console renderings all read the same Report object.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from enum import StrEnum
from typing import Any

from .aggregator import CompletionAggregator, CompletionSummary, MostProductiveDay, pick_most_productive

logger = logging.getLogger(__name__)


class ReportPeriod(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, raw: str | None) -> ReportPeriod:
        """Unknown or empty input silently means weekly."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.WEEKLY

    @property
    def label(self) -> str:
        return PERIOD_LABELS[self]

    @property
    def lookback_days(self) -> int:
        return _LOOKBACK_DAYS[self]


PERIOD_LABELS: dict[ReportPeriod, str] = {
    ReportPeriod.DAILY: "Today",
    ReportPeriod.WEEKLY: "Last 7 Days",
    ReportPeriod.MONTHLY: "Last 30 Days",
}

_LOOKBACK_DAYS: dict[ReportPeriod, int] = {
    ReportPeriod.DAILY: 0,
    ReportPeriod.WEEKLY: 6,
    ReportPeriod.MONTHLY: 30,
}


def report_window(period: ReportPeriod, today: date) -> tuple[date, date]:
    """Inclusive [start, end] window, calendar-day arithmetic on plain dates."""
    return today - timedelta(days=period.lookback_days), today


def iter_days(start: date, end: date):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def display_date(d: date) -> str:
    # e.g. "Mon, Jun 10"
    return f"{d:%a}, {d:%b} {d.day}"


@dataclass(frozen=True, slots=True)
class ChartPoint:
    display_date: str
    count: int
    iso_date: str

    def to_dict(self) -> dict[str, Any]:
        return {"displayDate": self.display_date, "count": self.count, "isoDate": self.iso_date}


@dataclass(frozen=True, slots=True)
class Report:
    period: ReportPeriod
    start_date: date
    end_date: date
    chart: list[ChartPoint]
    summary: CompletionSummary
    most_productive: MostProductiveDay

    def to_dict(self) -> dict[str, Any]:
        """JSON API shape."""
        return {
            "chartData": [p.to_dict() for p in self.chart],
            "summary": self.summary.to_dict(),
            "mostProductive": self.most_productive.to_dict(),
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "period": self.period.value,
        }


def _utc_today() -> date:
    return datetime.now(UTC).date()


class ReportAssembler:
    def __init__(
        self,
        aggregator: CompletionAggregator,
        *,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._aggregator = aggregator
        self._today = today

    def build(self, owner_id: int, period: str | ReportPeriod | None, today: date | None = None) -> Report:
        p = period if isinstance(period, ReportPeriod) else ReportPeriod.parse(period)
        start, end = report_window(p, today or self._today())

        counts = self._aggregator.daily_counts(owner_id, start, end)
        by_day = {c.date: c.count for c in counts}

        chart = [
            ChartPoint(display_date=display_date(d), count=by_day.get(d, 0), iso_date=d.isoformat())
            for d in iter_days(start, end)
        ]

        summary = self._aggregator.summary(owner_id, start, end)
        logger.debug(
            "Report owner=%s period=%s window=%s..%s total=%s",
            owner_id,
            p.value,
            start,
            end,
            summary.total_completed,
        )

        return Report(
            period=p,
            start_date=start,
            end_date=end,
            chart=chart,
            summary=summary,
            most_productive=pick_most_productive(counts),
        )
