# src/productivity_tracker/reports/formatter.py

from __future__ import annotations

from datetime import date

from .assembler import Report, ReportPeriod


def _average(report: Report) -> str:
    s = report.summary
    return f"{s.average_per_day:.1f}" if s.productive_days > 0 else "0"


def _short_date(d: date) -> str:
    # M/D/YYYY
    return f"{d.month}/{d.day}/{d.year}"


def render_csv(report: Report, generated_on: date) -> str:
    """
    CSV export.

    Display dates contain a comma and are written unquoted.
    """
    lines = [
        f"Productivity Report - {report.period.label}",
        f"Generated on: {_short_date(generated_on)}",
        "",
        "Summary:",
        f"Total Completed,{report.summary.total_completed}",
        f"Productive Days,{report.summary.productive_days}",
        f"Average Per Day,{_average(report)}",
        f"Best Day,{report.most_productive.count}",
        "",
        "Daily Breakdown:",
        "Date,Tasks Completed",
    ]
    lines.extend(f"{p.display_date},{p.count}" for p in report.chart)
    return "\n".join(lines) + "\n"


def csv_filename(period: ReportPeriod, today: date) -> str:
    return f"productivity-report-{period.value}-{today.isoformat()}.csv"


def _insight_span(period: ReportPeriod) -> str:
    if period is ReportPeriod.DAILY:
        return "today"
    if period is ReportPeriod.WEEKLY:
        return "in the last 7 days"
    return "in the last 30 days"


def render_text(report: Report) -> str:
    """Plain-text rendering for the console connector."""
    s = report.summary
    lines = [
        f"Productivity Report - {report.period.label} "
        f"({report.start_date.isoformat()} .. {report.end_date.isoformat()})",
        f"  Total completed: {s.total_completed}",
        f"  Productive days: {s.productive_days}",
        f"  Avg. per day:    {_average(report)}",
        f"  Best day:        {report.most_productive.count}",
        "",
    ]

    width = max((len(p.display_date) for p in report.chart), default=0)
    for p in report.chart:
        lines.append(f"  {p.display_date.ljust(width)}  {'#' * p.count} {p.count}")

    lines.append("")
    lines.append(f"You completed {s.total_completed} tasks {_insight_span(report.period)}.")
    if s.productive_days > 0:
        lines.append(
            f"You were productive on {s.productive_days} days, "
            f"averaging {s.average_per_day:.1f} tasks per productive day."
        )
    if report.most_productive.date is not None:
        lines.append(
            f"Your most productive day was {_short_date(report.most_productive.date)} "
            f"with {report.most_productive.count} tasks completed."
        )
    return "\n".join(lines)
