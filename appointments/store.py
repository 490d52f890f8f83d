"""
ORM-backed appointment store.

The ledger only talks to the database through this class, which keeps the
"lock professional, check overlap, insert" sequence in one place.
"""

from contextlib import contextmanager
from datetime import date
from typing import List, Optional

from django.db import transaction

from .exceptions import NotFoundError
from .intervals import Interval, from_minutes
from .models import Appointment, AppointmentType, Professional
from .states import AppointmentStatus
from .types import AppointmentFilters


class AppointmentStore:
    """Reads and writes appointments through the Django ORM."""

    @contextmanager
    def atomic_for(self, professional_id):
        """
        Open a transaction holding a row lock on the professional.

        SELECT ... FOR UPDATE serialises writers across processes on backends
        that support it; SQLite ignores it.
        """
        with transaction.atomic():
            try:
                professional = (
                    Professional.objects
                    .select_for_update()
                    .get(pk=professional_id)
                )
            except Professional.DoesNotExist:
                raise NotFoundError(
                    f"Professional {professional_id} not found",
                    professional_id=professional_id,
                ) from None
            yield professional

    def get_professional(self, professional_id) -> Professional:
        try:
            return Professional.objects.get(pk=professional_id)
        except Professional.DoesNotExist:
            raise NotFoundError(
                f"Professional {professional_id} not found",
                professional_id=professional_id,
            ) from None

    def get_appointment_type(self, professional_id, appointment_type_id) -> Optional[AppointmentType]:
        return (
            AppointmentType.objects
            .active()
            .filter(pk=appointment_type_id, professional_id=professional_id)
            .first()
        )

    def get(self, appointment_id, for_update=False) -> Appointment:
        queryset = Appointment.objects.select_related('professional', 'appointment_type')
        if for_update:
            queryset = queryset.select_for_update(of=('self',))
        try:
            return queryset.get(pk=appointment_id)
        except Appointment.DoesNotExist:
            raise NotFoundError(
                f"Appointment {appointment_id} not found",
                appointment_id=appointment_id,
            ) from None

    def booked_windows(self, professional_id, on_date: date, exclude_id=None) -> List[Interval]:
        """Windows occupied by blocking appointments on a date."""
        queryset = (
            Appointment.objects
            .for_professional(professional_id)
            .on_date(on_date)
            .blocking()
        )
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        return sorted(appointment.window for appointment in queryset)

    def add(self, professional, appointment_type, on_date, start, status, client) -> Appointment:
        return Appointment.objects.create(
            professional=professional,
            appointment_type=appointment_type,
            client_name=client.name,
            client_email=client.email,
            client_phone=client.phone,
            date=on_date,
            start_time=from_minutes(start),
            duration_minutes=appointment_type.duration_minutes,
            location=client.location,
            urgency=client.urgency,
            notes=client.notes,
            status=status,
        )

    def add_replacement(self, original: Appointment, on_date, start, status) -> Appointment:
        """Create the appointment that replaces a rescheduled one."""
        return Appointment.objects.create(
            professional_id=original.professional_id,
            appointment_type_id=original.appointment_type_id,
            client_name=original.client_name,
            client_email=original.client_email,
            client_phone=original.client_phone,
            date=on_date,
            start_time=from_minutes(start),
            duration_minutes=original.duration_minutes,
            location=original.location,
            urgency=original.urgency,
            notes=original.notes,
            payment_status=original.payment_status,
            status=status,
            rescheduled_from=original,
        )

    def set_status(self, appointment: Appointment, status) -> Appointment:
        appointment.status = status
        appointment.save(update_fields=['status', 'updated_at'])
        return appointment

    def search(self, professional_id, filters: Optional[AppointmentFilters] = None) -> List[Appointment]:
        """Appointments of a professional matching the dashboard filters."""
        filters = filters or AppointmentFilters()
        queryset = (
            Appointment.objects
            .for_professional(professional_id)
            .select_related('appointment_type')
            .in_date_range(filters.date_from, filters.date_to)
        )
        if filters.status:
            queryset = queryset.with_status(filters.status)
        if filters.appointment_type_id:
            queryset = queryset.filter(appointment_type_id=filters.appointment_type_id)
        if filters.location:
            queryset = queryset.filter(location=filters.location)
        if filters.search:
            queryset = queryset.search(filters.search)
        return list(queryset)

    def confirmed_before(self, cutoff_date: date) -> List[Appointment]:
        """Confirmed appointments dated on or before a date."""
        return list(
            Appointment.objects
            .with_status(AppointmentStatus.CONFIRMED)
            .filter(date__lte=cutoff_date)
            .select_related('professional')
        )
