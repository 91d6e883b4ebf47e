"""Personal task tracker with completion reports and overdue reminders."""

__version__ = "0.1.0"
