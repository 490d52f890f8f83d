"""
Booking ledger: the only component that writes appointments.

Every mutation for a professional runs under that professional's lock and
inside a transaction, so the free-window check and the write it guards are
atomic. Notifications are scheduled after the lock is released and only fire
once the surrounding transaction commits.
"""

import logging
from datetime import date, datetime
from functools import partial
from typing import Callable, Optional

from django.db import transaction
from django.utils import timezone

from .exceptions import ConflictError, NotFoundError, ValidationError
from .intervals import contains, format_minutes, from_minutes
from .locks import ProfessionalLocks
from .models import Appointment
from .slots import free_windows
from .states import AppointmentStatus, check_transition
from .store import AppointmentStore
from .types import BookingEvent, ClientInfo


logger = logging.getLogger(__name__)


class BookingLedger:
    """Appointment state machine with conflict-free commits."""

    def __init__(
        self,
        store: Optional[AppointmentStore] = None,
        locks: Optional[ProfessionalLocks] = None,
        dispatcher=None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.store = store or AppointmentStore()
        self.locks = locks or ProfessionalLocks()
        self.dispatcher = dispatcher
        self.clock = clock

    def reserve(
        self,
        professional_id,
        on_date: date,
        start: int,
        appointment_type_id,
        client: ClientInfo,
    ) -> Appointment:
        """
        Book a slot for a client.

        Args:
            professional_id: Professional being booked
            on_date: Appointment date
            start: Start time in minutes since midnight
            appointment_type_id: Appointment type; its duration is copied
            client: Client details

        Returns:
            Created Appointment, pending or confirmed

        Raises:
            ValidationError: Unknown/inactive professional or type, or a start in the past
            ConflictError: The window is not entirely free at commit time
        """
        with self.locks.hold(professional_id):
            try:
                appointment = self._reserve_locked(
                    professional_id, on_date, start, appointment_type_id, client
                )
            except NotFoundError as exc:
                raise ValidationError(str(exc), **exc.context) from exc

        logger.info(
            "Reserved appointment %s for professional %s on %s at %s (%s)",
            appointment.pk, professional_id, on_date,
            format_minutes(start), appointment.status,
        )
        self._notify(appointment, 'created')
        return appointment

    def _reserve_locked(self, professional_id, on_date, start, appointment_type_id, client):
        with self.store.atomic_for(professional_id) as professional:
            appointment_type = self._check_request(
                professional, on_date, start, appointment_type_id
            )
            self._check_free(
                professional, on_date, start, appointment_type.duration_minutes
            )
            return self.store.add(
                professional=professional,
                appointment_type=appointment_type,
                on_date=on_date,
                start=start,
                status=self._initial_status(professional),
                client=client,
            )

    def confirm(self, appointment_id) -> Appointment:
        """Move a pending appointment to confirmed."""
        appointment = self._transition(appointment_id, AppointmentStatus.CONFIRMED)
        self._notify(appointment, 'confirmed')
        return appointment

    def cancel(self, appointment_id) -> Appointment:
        """Cancel a pending or confirmed appointment, freeing its window."""
        appointment = self._transition(appointment_id, AppointmentStatus.CANCELLED)
        self._notify(appointment, 'cancelled')
        return appointment

    def mark_completed(self, appointment_id) -> Appointment:
        """
        Mark a confirmed appointment as completed.

        Raises:
            ValidationError: If the appointment has not ended yet
        """
        return self._transition(
            appointment_id,
            AppointmentStatus.COMPLETED,
            precondition=self._check_ended,
        )

    def mark_no_show(self, appointment_id) -> Appointment:
        """Record that the client of a confirmed appointment did not attend."""
        return self._transition(appointment_id, AppointmentStatus.NO_SHOW)

    def reschedule(self, appointment_id, new_date: date, new_start: int) -> Appointment:
        """
        Move an appointment to a new date and time.

        The original is marked rescheduled and a new appointment, linked to it,
        is created with the same type, duration and client.

        Returns:
            The new Appointment

        Raises:
            ConflictError: The new window is not free (ignoring the moved appointment)
            InvalidTransitionError: The original is in a terminal status
        """
        original = self.store.get(appointment_id)
        professional_id = original.professional_id

        with self.locks.hold(professional_id):
            with self.store.atomic_for(professional_id) as professional:
                original = self.store.get(appointment_id, for_update=True)
                check_transition(original.status, AppointmentStatus.RESCHEDULED)
                self._check_future(professional, new_date, new_start)
                self._check_free(
                    professional, new_date, new_start, original.duration_minutes,
                    exclude_id=original.pk,
                )
                self.store.set_status(original, AppointmentStatus.RESCHEDULED)
                replacement = self.store.add_replacement(
                    original,
                    on_date=new_date,
                    start=new_start,
                    status=self._initial_status(professional),
                )

        logger.info(
            "Rescheduled appointment %s to %s on %s at %s",
            appointment_id, replacement.pk, new_date, format_minutes(new_start),
        )
        self._notify(replacement, 'rescheduled')
        return replacement

    def _transition(self, appointment_id, target, precondition=None) -> Appointment:
        professional_id = self.store.get(appointment_id).professional_id

        with self.locks.hold(professional_id):
            with self.store.atomic_for(professional_id):
                appointment = self.store.get(appointment_id, for_update=True)
                check_transition(appointment.status, target)
                if precondition is not None:
                    precondition(appointment)
                previous = appointment.status
                self.store.set_status(appointment, target)

        logger.info(
            "Appointment %s moved from %s to %s", appointment_id, previous, target.value
        )
        return appointment

    def _check_request(self, professional, on_date, start, appointment_type_id):
        if not professional.is_active:
            raise ValidationError(
                f"Professional {professional.pk} is not accepting bookings",
                professional_id=professional.pk,
            )
        appointment_type = self.store.get_appointment_type(professional.pk, appointment_type_id)
        if appointment_type is None:
            raise ValidationError(
                f"Unknown appointment type {appointment_type_id} for professional {professional.pk}",
                appointment_type_id=appointment_type_id,
            )
        if appointment_type.duration_minutes <= 0:
            raise ValidationError(
                f"Appointment type {appointment_type.pk} has a non-positive duration",
                appointment_type_id=appointment_type.pk,
            )
        self._check_future(professional, on_date, start)
        return appointment_type

    def _check_future(self, professional, on_date, start):
        starts_at = datetime.combine(on_date, from_minutes(start), tzinfo=professional.tzinfo)
        if starts_at <= self.clock():
            raise ValidationError(
                f"{on_date} {format_minutes(start)} is in the past",
                date=str(on_date),
                start=format_minutes(start),
            )

    def _check_free(self, professional, on_date, start, duration, exclude_id=None):
        requested = (start, start + duration)
        windows = free_windows(professional, on_date, self.store, exclude_id=exclude_id)
        if not any(contains(window, requested) for window in windows):
            logger.info(
                "Conflict for professional %s on %s at %s-%s",
                professional.pk, on_date,
                format_minutes(requested[0]), format_minutes(requested[1]),
            )
            raise ConflictError(
                f"{on_date} {format_minutes(start)} is no longer available",
                date=str(on_date),
                start=format_minutes(start),
            )

    def _check_ended(self, appointment):
        ends_at = appointment.end_datetime
        if ends_at > self.clock():
            raise ValidationError(
                f"Appointment {appointment.pk} has not ended yet",
                appointment_id=appointment.pk,
            )

    @staticmethod
    def _initial_status(professional):
        if professional.instant_confirmation:
            return AppointmentStatus.CONFIRMED
        return AppointmentStatus.PENDING

    def _notify(self, appointment, event):
        if self.dispatcher is None:
            return
        booking_event = BookingEvent(
            appointment_id=appointment.pk,
            professional_id=appointment.professional_id,
            client_email=appointment.client_email,
            event=event,
        )
        transaction.on_commit(partial(self.dispatcher.dispatch, booking_event))
