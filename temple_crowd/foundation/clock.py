"""Local clock utilities.

The synthesis path picks the "current" hourly bucket from the local hour of
day.  This module is the single source of "now" so tests can monkey-patch
it trivially.
"""

from __future__ import annotations

from datetime import date, datetime


def local_now() -> datetime:
    """Return the current local time as a timezone-aware datetime."""
    return datetime.now().astimezone()


def local_today() -> date:
    """Return today's local calendar date."""
    return local_now().date()
