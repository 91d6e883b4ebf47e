# tests/test_report_assembler.py

from __future__ import annotations

from datetime import date, timedelta

import pytest

from productivity_tracker.reports.aggregator import CompletionAggregator
from productivity_tracker.reports.assembler import (
    ReportAssembler,
    ReportPeriod,
    display_date,
    report_window,
)
from productivity_tracker.tasks.task_store import TaskStore

from .conftest import ts

TODAY = date(2024, 6, 10)


@pytest.fixture()
def assembler(store: TaskStore) -> ReportAssembler:
    return ReportAssembler(CompletionAggregator(store), today=lambda: TODAY)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("daily", ReportPeriod.DAILY),
        ("Weekly", ReportPeriod.WEEKLY),
        ("monthly", ReportPeriod.MONTHLY),
        ("yearly", ReportPeriod.WEEKLY),
        ("", ReportPeriod.WEEKLY),
        (None, ReportPeriod.WEEKLY),
    ],
)
def test_period_parse_falls_back_to_weekly(raw, expected) -> None:
    assert ReportPeriod.parse(raw) is expected


def test_report_windows() -> None:
    assert report_window(ReportPeriod.DAILY, TODAY) == (TODAY, TODAY)
    assert report_window(ReportPeriod.WEEKLY, TODAY) == (date(2024, 6, 4), TODAY)
    assert report_window(ReportPeriod.MONTHLY, TODAY) == (date(2024, 5, 11), TODAY)


def test_weekly_report_zero_fills_every_day(assembler: ReportAssembler, alice) -> None:
    report = assembler.build(alice.id, "weekly")

    assert len(report.chart) == 7
    assert all(p.count == 0 for p in report.chart)
    expected = [(TODAY - timedelta(days=6 - i)).isoformat() for i in range(7)]
    assert [p.iso_date for p in report.chart] == expected
    assert report.start_date == date(2024, 6, 4)
    assert report.end_date == TODAY
    assert report.most_productive.date is None


def test_report_lengths_per_period(assembler: ReportAssembler, alice) -> None:
    assert len(assembler.build(alice.id, "daily").chart) == 1
    assert len(assembler.build(alice.id, "monthly").chart) == 31
    assert len(assembler.build(alice.id, "bogus").chart) == 7


def test_report_places_counts_on_their_days(store: TaskStore, assembler: ReportAssembler, alice) -> None:
    for when in (ts(2024, 6, 5), ts(2024, 6, 5, 20), ts(2024, 6, 10, 8), ts(2024, 6, 1)):
        t = store.create_task(alice.id, title="t", due_date="2024-06-30")
        store.toggle_completion(alice.id, t.id, now=when)

    report = assembler.build(alice.id, ReportPeriod.WEEKLY)
    by_day = {p.iso_date: p.count for p in report.chart}

    assert by_day["2024-06-05"] == 2
    assert by_day["2024-06-10"] == 1
    assert sum(by_day.values()) == report.summary.total_completed == 3
    assert report.summary.productive_days == 2
    assert report.most_productive.date == date(2024, 6, 5)
    assert report.most_productive.count == 2


def test_report_to_dict_shape(assembler: ReportAssembler, alice) -> None:
    data = assembler.build(alice.id, "daily").to_dict()

    assert set(data) == {"chartData", "summary", "mostProductive", "startDate", "endDate", "period"}
    assert data["chartData"] == [{"displayDate": "Mon, Jun 10", "count": 0, "isoDate": "2024-06-10"}]
    assert data["mostProductive"] == {"date": None, "count": 0}
    assert data["startDate"] == data["endDate"] == "2024-06-10"
    assert data["period"] == "daily"


def test_display_date() -> None:
    assert display_date(date(2024, 6, 10)) == "Mon, Jun 10"
    assert display_date(date(2024, 12, 1)) == "Sun, Dec 1"
