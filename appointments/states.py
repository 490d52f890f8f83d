"""
Appointment status values and the transition table.

All status changes go through ``check_transition`` so the table below is the
single place that decides what moves are legal.
"""

from django.db import models

from .exceptions import InvalidTransitionError


class AppointmentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'
    NO_SHOW = 'no_show', 'No-show'
    RESCHEDULED = 'rescheduled', 'Rescheduled'


TRANSITIONS = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.RESCHEDULED,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.RESCHEDULED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
    AppointmentStatus.RESCHEDULED: frozenset(),
}

# Statuses whose time window is unavailable to other bookings.
BLOCKING_STATUSES = (
    AppointmentStatus.PENDING,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.COMPLETED,
)

TERMINAL_STATUSES = tuple(
    status for status, targets in TRANSITIONS.items() if not targets
)


def is_terminal(status) -> bool:
    return not TRANSITIONS[AppointmentStatus(status)]


def check_transition(current, target) -> None:
    """
    Validate a status change.

    Raises:
        InvalidTransitionError: If ``target`` is not reachable from ``current``
    """
    current = AppointmentStatus(current)
    target = AppointmentStatus(target)
    if target not in TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Cannot move appointment from '{current.value}' to '{target.value}'",
            current=current.value,
            target=target.value,
        )
