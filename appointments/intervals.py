"""
Interval arithmetic over half-open ``(start, end)`` windows on a single date.

Times are integer minutes since midnight. Functions here are pure and know
nothing about models.
"""

from datetime import time
from typing import Iterable, List, Optional, Tuple

Interval = Tuple[int, int]

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: time) -> int:
    """Convert a time-of-day to minutes since midnight (seconds are dropped)."""
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    """Convert minutes since midnight to a time-of-day."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} is outside a single day")
    return time(minutes // 60, minutes % 60)


def format_minutes(minutes: int) -> str:
    """Render minutes as ``HH:MM``; 1440 renders as ``24:00``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_hhmm(value: str) -> int:
    """
    Parse an ``HH:MM`` string into minutes since midnight.

    Raises:
        ValueError: If the string is not a valid time of day
    """
    try:
        hours, minutes = value.strip().split(':')
        hours, minutes = int(hours), int(minutes)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time '{value}', expected HH:MM") from None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return hours * 60 + minutes


def overlaps(a: Interval, b: Interval) -> bool:
    """True when two half-open intervals share at least one minute."""
    return a[0] < b[1] and b[0] < a[1]


def intersect(a: Interval, b: Interval) -> Optional[Interval]:
    """Common part of two intervals, or None when they do not overlap."""
    start, end = max(a[0], b[0]), min(a[1], b[1])
    if start < end:
        return start, end
    return None


def contains(window: Interval, interval: Interval) -> bool:
    """True when ``interval`` lies entirely inside ``window``."""
    return window[0] <= interval[0] and interval[1] <= window[1]


def subtract(base: Iterable[Interval], removals: Iterable[Interval]) -> List[Interval]:
    """
    Remove every removal window from the base windows.

    A removal strictly inside a base window splits it in two. Zero-length
    pieces are dropped and touching pieces are not merged.

    Returns:
        Sorted, non-overlapping list of remaining windows
    """
    cuts = sorted((start, end) for start, end in removals if start < end)
    remaining = []

    for window_start, window_end in sorted(base):
        cursor = window_start
        for cut_start, cut_end in cuts:
            if cut_end <= cursor:
                continue
            if cut_start >= window_end:
                break
            if cut_start > cursor:
                remaining.append((cursor, cut_start))
            cursor = max(cursor, cut_end)
            if cursor >= window_end:
                break
        if cursor < window_end:
            remaining.append((cursor, window_end))

    return remaining
