"""
Slot generation.

Free time on a date is the schedule's base windows minus applicable
exceptions and blocking appointments. Slots are enumerated on a fixed grid
inside each free window, so a slot never crosses into removed time.
"""

from datetime import date, datetime
from typing import List, Optional

from django.utils import timezone

from . import schedule
from .intervals import Interval, from_minutes, subtract
from .types import Slot


def free_windows(professional, on_date: date, store, exclude_id=None) -> List[Interval]:
    """
    Compute the free windows of a professional on a date.

    Args:
        professional: Professional instance
        on_date: Date to compute
        store: AppointmentStore used to read booked windows
        exclude_id: Appointment id to ignore (the one being rescheduled)

    Returns:
        Sorted, disjoint free windows
    """
    base = schedule.base_windows(professional, on_date)
    if not base:
        return []

    removals = schedule.exceptions_on(professional, on_date)
    removals += store.booked_windows(professional.pk, on_date, exclude_id=exclude_id)
    return subtract(base, removals)


def first_grid_start(window_start: int, step: int) -> int:
    """Round a window start up to the next multiple of ``step``."""
    return -(-window_start // step) * step


def generate_slots(
    professional,
    on_date: date,
    store,
    duration_minutes: int,
    step: int,
    now: Optional[datetime] = None,
) -> List[Slot]:
    """
    Generate the slot grid for a date.

    Args:
        professional: Professional instance
        on_date: Date to generate slots for
        store: AppointmentStore used to read booked windows
        duration_minutes: Length of each slot
        step: Grid step between consecutive slot starts
        now: Current instant; defaults to timezone.now()

    Returns:
        Slots ordered by start; past slots are returned with available=False
    """
    now = (now or timezone.now()).astimezone(professional.tzinfo)
    slots = []

    for window_start, window_end in free_windows(professional, on_date, store):
        start = first_grid_start(window_start, step)
        while start + duration_minutes <= window_end:
            starts_at = datetime.combine(on_date, from_minutes(start), tzinfo=professional.tzinfo)
            slots.append(Slot(
                date=on_date,
                start=start,
                duration_minutes=duration_minutes,
                available=starts_at > now,
            ))
            start += step

    return slots