from __future__ import annotations
from datetime import datetime
from typing import Tuple

from .models import Event, comparable_date

# Largest unit first; months and years are fixed-length approximations.
_UNITS = [
    ("year", 365 * 86400),
    ("month", 30 * 86400),
    ("week", 7 * 86400),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]


def _seconds_between(when: datetime, now: datetime) -> float:
    return (comparable_date(when) - comparable_date(now)).total_seconds()


def relative_label(when: datetime, now: datetime) -> str:
    """
    Full-style relative label, e.g. "in 2 days", "1 hour ago", "in 0 seconds".
    The value is truncated toward zero in the largest unit that fits.
    """
    delta = _seconds_between(when, now)
    magnitude = abs(delta)

    count, unit = 0, "second"
    for name, size in _UNITS:
        if magnitude >= size:
            count, unit = int(magnitude // size), name
            break

    noun = unit if count == 1 else f"{unit}s"
    if delta < 0 and count > 0:
        return f"{count} {noun} ago"
    return f"in {count} {noun}"


def row_label(event: Event, now: datetime) -> Tuple[str, str]:
    return event.title, relative_label(event.date, now)
