"""
Public entry point for the booking UI and dashboard.

BookingFacade parses and validates caller input (``YYYY-MM-DD`` dates,
``HH:MM`` times), then delegates to slot generation or the ledger. Every
method has an ``a``-prefixed coroutine twin for async callers.
"""

from datetime import date, datetime, time, timedelta
from typing import List, Optional, Union

from asgiref.sync import sync_to_async
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.utils.dateparse import parse_date

from . import slots
from .conf import BookingConfig, get_booking_config
from .exceptions import NotFoundError, ValidationError
from .intervals import parse_hhmm, to_minutes, MINUTES_PER_DAY
from .ledger import BookingLedger
from .locks import ProfessionalLocks
from .models import Appointment
from .notifications import NotificationDispatcher
from .states import AppointmentStatus
from .store import AppointmentStore
from .types import AppointmentFilters, ClientInfo, Slot


DateInput = Union[date, str]
TimeInput = Union[int, time, str]


class BookingFacade:
    """Validating front for slot listing and appointment management."""

    def __init__(self, ledger: BookingLedger, config: Optional[BookingConfig] = None):
        self.ledger = ledger
        self.store = ledger.store
        self.config = config or BookingConfig()

    @classmethod
    def from_settings(cls):
        """Build a facade, ledger and dispatcher from ``settings.BOOKING``."""
        config = get_booking_config()
        ledger = BookingLedger(
            store=AppointmentStore(),
            locks=ProfessionalLocks(timeout=config.lock_timeout_seconds),
            dispatcher=NotificationDispatcher.from_config(config),
        )
        return cls(ledger, config)

    def list_slots(
        self,
        professional_id,
        on_date: DateInput,
        appointment_type_id=None,
    ) -> List[Slot]:
        """
        List the slot grid of a professional for a date.

        Args:
            professional_id: Professional id
            on_date: Date or ``YYYY-MM-DD`` string
            appointment_type_id: Optional type; without it slots use the default length

        Returns:
            Slots ordered by start time; empty for a professional not taking bookings

        Raises:
            NotFoundError: Unknown professional
            ValidationError: Bad date, date out of range, unknown appointment type
                or a type with a non-positive duration
        """
        professional = self.store.get_professional(_parse_id(professional_id, 'professional_id'))
        on_date = _parse_date(on_date)
        self._check_date_range(professional, on_date)

        duration = self.config.default_slot_minutes
        if appointment_type_id not in (None, ''):
            appointment_type = self.store.get_appointment_type(
                professional.pk, _parse_id(appointment_type_id, 'appointment_type_id')
            )
            if appointment_type is None:
                raise ValidationError(
                    f"Unknown appointment type {appointment_type_id}",
                    appointment_type_id=appointment_type_id,
                )
            duration = appointment_type.duration_minutes
            if duration <= 0:
                raise ValidationError(
                    f"Appointment type {appointment_type.pk} has a non-positive duration",
                    appointment_type_id=appointment_type.pk,
                )

        if not professional.is_active:
            return []

        return slots.generate_slots(
            professional,
            on_date,
            self.store,
            duration_minutes=duration,
            step=self.config.slot_step_minutes,
            now=self.ledger.clock(),
        )

    def reserve(
        self,
        professional_id,
        on_date: DateInput,
        start_time: TimeInput,
        appointment_type_id,
        client: ClientInfo,
    ) -> Appointment:
        """
        Reserve a slot.

        Raises:
            ValidationError: Bad input, unknown professional or type, past start
            ConflictError: Slot taken since it was listed; refetch and retry
        """
        professional_id = _parse_id(professional_id, 'professional_id')
        try:
            professional = self.store.get_professional(professional_id)
        except NotFoundError as exc:
            raise ValidationError(str(exc), **exc.context) from exc

        on_date = _parse_date(on_date)
        self._check_date_range(professional, on_date)
        _check_client(client)

        return self.ledger.reserve(
            professional_id,
            on_date,
            _parse_time(start_time),
            _parse_id(appointment_type_id, 'appointment_type_id'),
            client,
        )

    def get_appointment(self, appointment_id) -> Appointment:
        return self.store.get(_parse_id(appointment_id, 'appointment_id'))

    def confirm(self, appointment_id) -> Appointment:
        return self.ledger.confirm(_parse_id(appointment_id, 'appointment_id'))

    def cancel(self, appointment_id) -> Appointment:
        return self.ledger.cancel(_parse_id(appointment_id, 'appointment_id'))

    def mark_completed(self, appointment_id) -> Appointment:
        return self.ledger.mark_completed(_parse_id(appointment_id, 'appointment_id'))

    def mark_no_show(self, appointment_id) -> Appointment:
        return self.ledger.mark_no_show(_parse_id(appointment_id, 'appointment_id'))

    def reschedule(self, appointment_id, new_date: DateInput, new_start_time: TimeInput) -> Appointment:
        """
        Move an appointment to a new slot.

        Returns:
            The replacement appointment
        """
        appointment = self.get_appointment(appointment_id)
        new_date = _parse_date(new_date)
        self._check_date_range(appointment.professional, new_date)
        return self.ledger.reschedule(appointment.pk, new_date, _parse_time(new_start_time))

    def list_appointments(
        self,
        professional_id,
        filters: Optional[AppointmentFilters] = None,
    ) -> List[Appointment]:
        """
        List a professional's appointments, oldest first.

        Raises:
            NotFoundError: Unknown professional
            ValidationError: Unknown status or inverted date range
        """
        professional = self.store.get_professional(_parse_id(professional_id, 'professional_id'))
        filters = filters or AppointmentFilters()

        if filters.status and filters.status not in AppointmentStatus.values:
            raise ValidationError(f"Unknown status '{filters.status}'", status=filters.status)
        if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
            raise ValidationError("date_from must not be after date_to")

        return self.store.search(professional.pk, filters)

    async def alist_slots(self, *args, **kwargs):
        return await sync_to_async(self.list_slots)(*args, **kwargs)

    async def areserve(self, *args, **kwargs):
        return await sync_to_async(self.reserve)(*args, **kwargs)

    async def aget_appointment(self, appointment_id):
        return await sync_to_async(self.get_appointment)(appointment_id)

    async def aconfirm(self, appointment_id):
        return await sync_to_async(self.confirm)(appointment_id)

    async def acancel(self, appointment_id):
        return await sync_to_async(self.cancel)(appointment_id)

    async def amark_completed(self, appointment_id):
        return await sync_to_async(self.mark_completed)(appointment_id)

    async def amark_no_show(self, appointment_id):
        return await sync_to_async(self.mark_no_show)(appointment_id)

    async def areschedule(self, *args, **kwargs):
        return await sync_to_async(self.reschedule)(*args, **kwargs)

    async def alist_appointments(self, *args, **kwargs):
        return await sync_to_async(self.list_appointments)(*args, **kwargs)

    def _check_date_range(self, professional, on_date: date) -> None:
        today = self.ledger.clock().astimezone(professional.tzinfo).date()
        earliest = today - timedelta(days=self.config.max_days_past)
        latest = today + timedelta(days=self.config.max_days_ahead)
        if not earliest <= on_date <= latest:
            raise ValidationError(
                f"{on_date} is outside the bookable range {earliest} to {latest}",
                date=str(on_date),
            )


def _parse_id(value, field):
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer id", field=field)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer id", field=field) from None


def _parse_date(value: DateInput) -> date:
    if isinstance(value, datetime):
        raise ValidationError("Expected a calendar date, got a datetime")
    if isinstance(value, date):
        return value
    try:
        parsed = parse_date(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD", date=value)
    return parsed


def _parse_time(value: TimeInput) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid time '{value}'")
    if isinstance(value, int):
        if not 0 <= value < MINUTES_PER_DAY:
            raise ValidationError(f"Invalid time offset {value}", start=value)
        return value
    if isinstance(value, time):
        return to_minutes(value)
    try:
        return parse_hhmm(value)
    except ValueError as exc:
        raise ValidationError(str(exc), start=value) from exc


def _check_client(client: ClientInfo) -> None:
    if client is None:
        raise ValidationError("Client details are required")
    if not (client.name or '').strip():
        raise ValidationError("Client name is required", field='client_name')
    try:
        validate_email(client.email or '')
    except DjangoValidationError:
        raise ValidationError(f"Invalid client e-mail '{client.email}'", field='client_email') from None
    if client.location not in dict(Appointment.LOCATION_CHOICES):
        raise ValidationError(f"Unknown location '{client.location}'", field='location')
    if client.urgency not in dict(Appointment.URGENCY_CHOICES):
        raise ValidationError(f"Unknown urgency '{client.urgency}'", field='urgency')
