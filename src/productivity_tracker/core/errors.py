# src/productivity_tracker/core/errors.py

from __future__ import annotations


class TrackerError(Exception):
    """Base class for errors raised by the tracker core."""


class ValidationError(TrackerError):
    """User-correctable input problem (missing title, bad due date, ...)."""


class NotFoundError(TrackerError):
    """Record is missing or not owned by the caller."""


class StoreError(TrackerError):
    """Underlying persistence failure. The message is safe to log, not to show."""


class NotificationError(TrackerError):
    """A single reminder could not be delivered."""
