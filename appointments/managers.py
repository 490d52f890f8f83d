"""
Custom managers and querysets for booking models.

QuerySets define chainable query methods.
Managers use QuerySets to enable method chaining.
No business logic should be here - only query operations.
"""

from django.db import models

from .states import BLOCKING_STATUSES


class TimeExceptionQuerySet(models.QuerySet):
    """Custom queryset for TimeException model with chainable methods."""

    def for_professional(self, professional_id):
        return self.filter(professional_id=professional_id)

    def covering(self, date):
        """
        Get exceptions whose date range includes a date.

        Recurrence is not evaluated here; see appointments.schedule.

        Args:
            date: date object
        """
        return self.filter(start_date__lte=date, end_date__gte=date)


class TimeExceptionManager(models.Manager):
    """Custom manager for TimeException model."""

    def get_queryset(self):
        """Return custom queryset for method chaining."""
        return TimeExceptionQuerySet(self.model, using=self._db)

    def for_professional(self, professional_id):
        return self.get_queryset().for_professional(professional_id)

    def covering(self, date):
        return self.get_queryset().covering(date)


class AppointmentTypeQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)


class AppointmentTypeManager(models.Manager):

    def get_queryset(self):
        return AppointmentTypeQuerySet(self.model, using=self._db)

    def active(self):
        return self.get_queryset().active()


class AppointmentQuerySet(models.QuerySet):
    """Custom queryset for Appointment model with chainable methods."""

    def for_professional(self, professional_id):
        return self.filter(professional_id=professional_id)

    def on_date(self, date):
        return self.filter(date=date)

    def blocking(self):
        """Get appointments that occupy their time window (pending/confirmed/completed)."""
        return self.filter(status__in=BLOCKING_STATUSES)

    def with_status(self, status):
        return self.filter(status=status)

    def in_date_range(self, date_from=None, date_to=None):
        """
        Get appointments between two dates, both inclusive and optional.

        Args:
            date_from: date object or None
            date_to: date object or None
        """
        queryset = self
        if date_from:
            queryset = queryset.filter(date__gte=date_from)
        if date_to:
            queryset = queryset.filter(date__lte=date_to)
        return queryset

    def search(self, term):
        """Case-insensitive match on client name, e-mail, phone or notes."""
        return self.filter(
            models.Q(client_name__icontains=term)
            | models.Q(client_email__icontains=term)
            | models.Q(client_phone__icontains=term)
            | models.Q(notes__icontains=term)
        )


class AppointmentManager(models.Manager):
    """Custom manager for Appointment model."""

    def get_queryset(self):
        """Return custom queryset for method chaining."""
        return AppointmentQuerySet(self.model, using=self._db)

    def for_professional(self, professional_id):
        return self.get_queryset().for_professional(professional_id)

    def blocking(self):
        return self.get_queryset().blocking()

    def with_status(self, status):
        return self.get_queryset().with_status(status)
