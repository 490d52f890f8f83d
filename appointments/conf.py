"""
Engine configuration read from ``settings.BOOKING``.
"""

from dataclasses import dataclass, fields

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for slot generation and booking.

    Attributes:
        slot_step_minutes: Grid step between candidate slot starts
        default_slot_minutes: Slot length when no appointment type is chosen
        max_days_ahead: Furthest future date the facade accepts
        max_days_past: Furthest past date the facade accepts for listings
        lock_timeout_seconds: How long a mutation waits for the professional lock
        notifier: Dotted path of the notifier class
        notify_async: Deliver notifications on a worker thread
    """
    slot_step_minutes: int = 30
    default_slot_minutes: int = 30
    max_days_ahead: int = 365
    max_days_past: int = 30
    lock_timeout_seconds: float = 10
    notifier: str = 'appointments.notifications.LoggingNotifier'
    notify_async: bool = False

    def __post_init__(self):
        if self.slot_step_minutes <= 0 or (24 * 60) % self.slot_step_minutes:
            raise ImproperlyConfigured(
                f"SLOT_STEP_MINUTES must divide a day evenly, got {self.slot_step_minutes}"
            )
        if self.default_slot_minutes <= 0:
            raise ImproperlyConfigured("DEFAULT_SLOT_MINUTES must be positive")
        if self.lock_timeout_seconds <= 0:
            raise ImproperlyConfigured("LOCK_TIMEOUT_SECONDS must be positive")


def get_booking_config() -> BookingConfig:
    """Build the config from ``settings.BOOKING``; unknown keys are an error."""
    overrides = getattr(settings, 'BOOKING', {}) or {}
    known = {f.name for f in fields(BookingConfig)}
    values = {}
    for key, value in overrides.items():
        name = key.lower()
        if name not in known:
            raise ImproperlyConfigured(f"Unknown BOOKING setting: {key}")
        values[name] = value
    return BookingConfig(**values)
