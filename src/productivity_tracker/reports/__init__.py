"""
Reporting subsystem.

Components:
- aggregator.py: per-day completion counts, summary, most productive day
- assembler.py: period windows, zero-filled chart, Report structure
- formatter.py: CSV export and console rendering of a Report
"""
