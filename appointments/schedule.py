"""
Base availability of a professional on a date.

Turns the weekday's WeeklySchedule row into open windows and decides which
TimeExceptions apply to a date. Recurring exceptions are evaluated per queried
date rather than expanded into instances.
"""

from datetime import date
from typing import Iterable, List

from .exceptions import ConfigurationError
from .intervals import Interval, subtract, to_minutes
from .models import TimeException, WeeklySchedule


def base_windows(professional, on_date: date) -> List[Interval]:
    """
    Get the open windows of a professional's weekday schedule.

    Args:
        professional: Professional instance
        on_date: The calendar date being queried

    Returns:
        Sorted disjoint windows; empty when the day is closed or not configured

    Raises:
        ConfigurationError: If the weekday row violates its invariants
    """
    entry = (
        WeeklySchedule.objects
        .filter(professional=professional, weekday=on_date.weekday())
        .first()
    )
    if entry is None or not entry.is_open:
        return []
    return windows_for_entry(entry)


def windows_for_entry(entry: WeeklySchedule) -> List[Interval]:
    """Open windows of a single open WeeklySchedule row, break removed."""
    if entry.start_time is None or entry.end_time is None:
        raise ConfigurationError(
            f"{entry.get_weekday_display()} is open but has no opening hours",
            professional_id=entry.professional_id,
        )

    start, end = to_minutes(entry.start_time), to_minutes(entry.end_time)
    if start >= end:
        raise ConfigurationError(
            f"{entry.get_weekday_display()} opens at or after it closes",
            professional_id=entry.professional_id,
        )

    if not entry.has_break:
        return [(start, end)]

    if entry.break_start is None or entry.break_end is None:
        raise ConfigurationError(
            f"{entry.get_weekday_display()} has an incomplete break",
            professional_id=entry.professional_id,
        )
    break_window = (to_minutes(entry.break_start), to_minutes(entry.break_end))
    if not start <= break_window[0] < break_window[1] <= end:
        raise ConfigurationError(
            f"{entry.get_weekday_display()} break falls outside opening hours",
            professional_id=entry.professional_id,
        )
    return subtract([(start, end)], [break_window])


def exception_applies(exception: TimeException, on_date: date) -> bool:
    """
    Decide whether an exception removes time on a date.

    Raises:
        ConfigurationError: If the exception violates its invariants
    """
    _check_exception(exception)

    if not exception.start_date <= on_date <= exception.end_date:
        return False

    recurrence = exception.recurrence
    if recurrence in (TimeException.RECURRENCE_NONE, TimeException.RECURRENCE_DAILY):
        return True
    if recurrence == TimeException.RECURRENCE_WEEKLY:
        return on_date.weekday() in exception.weekdays
    if recurrence == TimeException.RECURRENCE_MONTHLY:
        return on_date.day == exception.start_date.day

    raise ConfigurationError(
        f"Unknown recurrence '{recurrence}' on exception {exception.pk}",
        exception_id=exception.pk,
    )


def exception_windows(exceptions: Iterable[TimeException], on_date: date) -> List[Interval]:
    """Windows removed on a date by the exceptions that apply to it."""
    return sorted(
        (to_minutes(exception.start_time), to_minutes(exception.end_time))
        for exception in exceptions
        if exception_applies(exception, on_date)
    )


def exceptions_on(professional, on_date: date) -> List[Interval]:
    """Windows removed on a date by all of a professional's exceptions."""
    candidates = TimeException.objects.for_professional(professional.pk).covering(on_date)
    return exception_windows(candidates, on_date)


def _check_exception(exception: TimeException) -> None:
    if exception.start_date > exception.end_date:
        raise ConfigurationError(
            f"Exception '{exception.title}' ends before it starts",
            exception_id=exception.pk,
        )
    if to_minutes(exception.start_time) >= to_minutes(exception.end_time):
        raise ConfigurationError(
            f"Exception '{exception.title}' has an empty time window",
            exception_id=exception.pk,
        )
    if exception.recurrence == TimeException.RECURRENCE_WEEKLY and not exception.weekdays:
        raise ConfigurationError(
            f"Weekly exception '{exception.title}' has no weekdays",
            exception_id=exception.pk,
        )
