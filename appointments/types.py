"""
Data types for the availability and booking engine.

This module contains:
- DTOs passed between the facade, the ledger and the store
- The derived Slot value returned by slot generation
"""

from dataclasses import dataclass
from typing import Optional
from datetime import date

from .intervals import format_minutes


@dataclass(frozen=True)
class Slot:
    """A candidate bookable window. Derived on every query, never stored."""
    date: date
    start: int
    duration_minutes: int
    available: bool

    @property
    def end(self) -> int:
        return self.start + self.duration_minutes

    @property
    def start_time(self) -> str:
        return format_minutes(self.start)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end)


@dataclass
class ClientInfo:
    """DTO for the client side of a booking request."""
    name: str
    email: str
    phone: str = ''
    location: str = 'office'
    urgency: str = 'medium'
    notes: str = ''


@dataclass
class AppointmentFilters:
    """DTO for appointment list filters."""
    status: Optional[str] = None
    appointment_type_id: Optional[int] = None
    location: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class BookingEvent:
    """Outbound notification emitted after a committed ledger write."""
    appointment_id: int
    professional_id: int
    client_email: str
    event: str
