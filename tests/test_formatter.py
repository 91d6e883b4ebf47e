# tests/test_formatter.py

from __future__ import annotations

from datetime import date

from productivity_tracker.reports.aggregator import CompletionSummary, MostProductiveDay
from productivity_tracker.reports.assembler import ChartPoint, Report, ReportPeriod
from productivity_tracker.reports.formatter import csv_filename, render_csv, render_text

from .conftest import ts


def _report() -> Report:
    return Report(
        period=ReportPeriod.WEEKLY,
        start_date=date(2024, 6, 8),
        end_date=date(2024, 6, 10),
        chart=[
            ChartPoint(display_date="Sat, Jun 8", count=2, iso_date="2024-06-08"),
            ChartPoint(display_date="Sun, Jun 9", count=0, iso_date="2024-06-09"),
            ChartPoint(display_date="Mon, Jun 10", count=3, iso_date="2024-06-10"),
        ],
        summary=CompletionSummary(total_completed=5, last_completed=ts(2024, 6, 10), productive_days=2),
        most_productive=MostProductiveDay(date=date(2024, 6, 10), count=3),
    )


def test_render_csv_layout() -> None:
    csv = render_csv(_report(), generated_on=date(2024, 6, 10))

    assert csv == (
        "Productivity Report - Last 7 Days\n"
        "Generated on: 6/10/2024\n"
        "\n"
        "Summary:\n"
        "Total Completed,5\n"
        "Productive Days,2\n"
        "Average Per Day,2.5\n"
        "Best Day,3\n"
        "\n"
        "Daily Breakdown:\n"
        "Date,Tasks Completed\n"
        "Sat, Jun 8,2\n"
        "Sun, Jun 9,0\n"
        "Mon, Jun 10,3\n"
    )


def test_render_csv_without_productive_days() -> None:
    empty = Report(
        period=ReportPeriod.DAILY,
        start_date=date(2024, 6, 10),
        end_date=date(2024, 6, 10),
        chart=[ChartPoint(display_date="Mon, Jun 10", count=0, iso_date="2024-06-10")],
        summary=CompletionSummary(total_completed=0, last_completed=None, productive_days=0),
        most_productive=MostProductiveDay(date=None, count=0),
    )
    lines = render_csv(empty, generated_on=date(2024, 6, 10)).splitlines()

    assert lines[0] == "Productivity Report - Today"
    assert "Average Per Day,0" in lines
    assert "Best Day,0" in lines
    assert lines[-1] == "Mon, Jun 10,0"


def test_csv_filename() -> None:
    assert csv_filename(ReportPeriod.MONTHLY, date(2024, 6, 10)) == "productivity-report-monthly-2024-06-10.csv"


def test_render_text_mentions_insights() -> None:
    text = render_text(_report())

    assert "Productivity Report - Last 7 Days" in text
    assert "You completed 5 tasks in the last 7 days." in text
    assert "averaging 2.5 tasks per productive day" in text
    assert "Your most productive day was 6/10/2024 with 3 tasks completed." in text
