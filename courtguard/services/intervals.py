"""Time-of-day arithmetic for reservation intervals.

Intervals are half-open ``[start, end)`` ranges measured in minutes since
midnight, so a booking ending at 11:00 and one starting at 11:00 share no
minute and never collide.
"""

from __future__ import annotations

from datetime import time

MINUTES_PER_DAY = 24 * 60


def to_minutes(time_of_day: str | time) -> int:
    """Convert an ``HH:MM`` wall-clock value to minutes since midnight.

    Raises ``ValueError`` when the value is not a 24-hour time.
    """
    if isinstance(time_of_day, time):
        return time_of_day.hour * 60 + time_of_day.minute

    hours_text, sep, minutes_text = time_of_day.strip().partition(":")
    if not sep or not hours_text.isdigit() or not minutes_text.isdigit():
        raise ValueError(f"Expected HH:MM, got {time_of_day!r}")
    hours, minutes = int(hours_text), int(minutes_text)
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Time of day out of range: {time_of_day!r}")
    return hours * 60 + minutes


def interval_of(start_time: str | time, duration_minutes: int) -> tuple[int, int]:
    """Return the ``(start, end)`` minute interval of a booking."""
    start = to_minutes(start_time)
    return start, start + duration_minutes


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """True iff ``[start_a, end_a)`` and ``[start_b, end_b)`` intersect.

    Empty intervals (start == end) never overlap anything.
    """
    if start_a >= end_a or start_b >= end_b:
        return False
    return start_a < end_b and start_b < end_a
