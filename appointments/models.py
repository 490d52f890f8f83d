"""
Models for the legal-professional booking engine.

Configuration (read-only to the engine):
- Professional owns a WeeklySchedule row per weekday, TimeExceptions and AppointmentTypes

Bookings:
- Appointment is the reservable unit; its status follows appointments.states
"""

from datetime import datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .exceptions import ConfigurationError
from .intervals import to_minutes
from .managers import (
    AppointmentManager,
    AppointmentTypeManager,
    TimeExceptionManager,
)
from .states import AppointmentStatus


WEEKDAY_CHOICES = [
    (0, 'Monday'),
    (1, 'Tuesday'),
    (2, 'Wednesday'),
    (3, 'Thursday'),
    (4, 'Friday'),
    (5, 'Saturday'),
    (6, 'Sunday'),
]


def _default_timezone():
    return settings.TIME_ZONE


class Professional(models.Model):
    """A lawyer whose calendar is booked through the engine."""

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    timezone = models.CharField(
        max_length=64,
        default=_default_timezone,
        help_text="IANA time zone all schedule times are expressed in"
    )
    instant_confirmation = models.BooleanField(
        default=False,
        help_text="New bookings start confirmed instead of pending"
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def tzinfo(self):
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(
                f"Professional {self.pk} has unknown time zone '{self.timezone}'",
                professional_id=self.pk,
            ) from None

    def clean(self):
        super().clean()
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError({'timezone': f'Unknown time zone "{self.timezone}".'})

    def save(self, *args, **kwargs):
        """Save with validation."""
        self.full_clean()
        super().save(*args, **kwargs)


class WeeklySchedule(models.Model):
    """Recurring availability of a professional on one weekday."""

    professional = models.ForeignKey(
        Professional,
        on_delete=models.CASCADE,
        related_name='weekly_schedule'
    )
    weekday = models.IntegerField(
        choices=WEEKDAY_CHOICES,
        help_text="Day of week (0=Monday, 6=Sunday)"
    )
    is_open = models.BooleanField(default=True)
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    break_start = models.TimeField(null=True, blank=True)
    break_end = models.TimeField(null=True, blank=True)

    class Meta:
        ordering = ['professional', 'weekday']
        constraints = [
            models.UniqueConstraint(
                fields=['professional', 'weekday'],
                name='unique_weekday_per_professional',
            ),
        ]

    def __str__(self):
        day = self.get_weekday_display()
        if not self.is_open:
            return f"{day}: closed"
        return f"{day}: {self.start_time:%H:%M}-{self.end_time:%H:%M}"

    @property
    def has_break(self):
        return self.break_start is not None or self.break_end is not None

    def clean(self):
        """Validate opening hours and break."""
        super().clean()

        if not self.is_open:
            return

        if self.start_time is None or self.end_time is None:
            raise ValidationError('Open days need a start and an end time.')

        if to_minutes(self.start_time) >= to_minutes(self.end_time):
            raise ValidationError({'end_time': 'End time must be after start time.'})

        if self.has_break:
            if self.break_start is None or self.break_end is None:
                raise ValidationError('A break needs both a start and an end.')
            start, end = to_minutes(self.start_time), to_minutes(self.end_time)
            b_start, b_end = to_minutes(self.break_start), to_minutes(self.break_end)
            if not start <= b_start < b_end <= end:
                raise ValidationError({
                    'break_start': 'Break must fall inside opening hours and end after it starts.'
                })

    def save(self, *args, **kwargs):
        """Save with validation."""
        self.full_clean()
        super().save(*args, **kwargs)


class TimeException(models.Model):
    """
    A period removed from a professional's availability.

    The time window applies on every date the exception matches; recurrence
    decides which dates inside [start_date, end_date] match.
    """

    TYPE_CHOICES = [
        ('vacation', 'Vacation'),
        ('break', 'Break'),
        ('meeting', 'Meeting'),
        ('personal', 'Personal'),
        ('other', 'Other'),
    ]

    RECURRENCE_NONE = 'none'
    RECURRENCE_DAILY = 'daily'
    RECURRENCE_WEEKLY = 'weekly'
    RECURRENCE_MONTHLY = 'monthly'

    RECURRENCE_CHOICES = [
        (RECURRENCE_NONE, 'Does not repeat'),
        (RECURRENCE_DAILY, 'Daily'),
        (RECURRENCE_WEEKLY, 'Weekly'),
        (RECURRENCE_MONTHLY, 'Monthly'),
    ]

    professional = models.ForeignKey(
        Professional,
        on_delete=models.CASCADE,
        related_name='time_exceptions'
    )
    title = models.CharField(max_length=200)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='other')

    start_date = models.DateField()
    end_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()

    recurrence = models.CharField(
        max_length=20,
        choices=RECURRENCE_CHOICES,
        default=RECURRENCE_NONE
    )
    weekdays = models.JSONField(
        default=list,
        blank=True,
        help_text="Weekdays (0=Monday, 6=Sunday) for weekly recurrence"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TimeExceptionManager()

    class Meta:
        ordering = ['start_date', 'start_time']
        indexes = [
            models.Index(fields=['professional', 'start_date', 'end_date'], name='timeexc_prof_range_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.get_type_display()})"

    def clean(self):
        """Validate date range, time window and weekly weekdays."""
        super().clean()

        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError({'end_date': 'End date cannot be before start date.'})

        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValidationError({'end_time': 'End time must be after start time.'})

        if self.recurrence == self.RECURRENCE_WEEKLY:
            if not self.weekdays:
                raise ValidationError({'weekdays': 'Weekly exceptions need at least one weekday.'})
            if any(not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6 for day in self.weekdays):
                raise ValidationError({'weekdays': 'Weekdays must be integers between 0 and 6.'})

    def save(self, *args, **kwargs):
        """Save with validation."""
        self.full_clean()
        super().save(*args, **kwargs)


class AppointmentType(models.Model):
    """A kind of consultation a client can book, with its duration and price."""

    professional = models.ForeignKey(
        Professional,
        on_delete=models.CASCADE,
        related_name='appointment_types'
    )
    name = models.CharField(max_length=200)
    duration_minutes = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    description = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)

    objects = AppointmentTypeManager()

    class Meta:
        ordering = ['professional', 'name']

    def __str__(self):
        return f"{self.name} ({self.duration_minutes} min)"

    def save(self, *args, **kwargs):
        """Save with validation."""
        self.full_clean()
        super().save(*args, **kwargs)


class Appointment(models.Model):
    """
    A client's booking with a professional.

    duration_minutes is copied from the appointment type when booked and is
    not affected by later edits to the type.
    """

    LOCATION_CHOICES = [
        ('office', 'Office'),
        ('online', 'Online'),
        ('phone', 'Phone'),
    ]

    URGENCY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('overdue', 'Overdue'),
    ]

    professional = models.ForeignKey(
        Professional,
        on_delete=models.CASCADE,
        related_name='appointments'
    )
    appointment_type = models.ForeignKey(
        AppointmentType,
        on_delete=models.PROTECT,
        related_name='appointments'
    )

    client_name = models.CharField(max_length=200)
    client_email = models.EmailField()
    client_phone = models.CharField(max_length=40, blank=True, default='')

    date = models.DateField()
    start_time = models.TimeField()
    duration_minutes = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    location = models.CharField(max_length=20, choices=LOCATION_CHOICES, default='office')
    urgency = models.CharField(max_length=20, choices=URGENCY_CHOICES, default='medium')
    notes = models.TextField(blank=True, default='')

    status = models.CharField(
        max_length=20,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.PENDING
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PAYMENT_STATUS_CHOICES,
        default='pending'
    )

    rescheduled_from = models.OneToOneField(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='rescheduled_to',
        help_text="Original appointment this one replaced"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AppointmentManager()

    class Meta:
        ordering = ['date', 'start_time']
        indexes = [
            models.Index(fields=['professional', 'date', 'status'], name='appt_prof_date_status_idx'),
            models.Index(fields=['status'], name='appt_status_idx'),
        ]

    def __str__(self):
        status_str = f" [{self.status}]" if self.status != AppointmentStatus.PENDING else ""
        return f"{self.client_name} - {self.date} {self.start_time:%H:%M}{status_str}"

    @property
    def start_minutes(self):
        return to_minutes(self.start_time)

    @property
    def end_minutes(self):
        return self.start_minutes + self.duration_minutes

    @property
    def window(self):
        return self.start_minutes, self.end_minutes

    @property
    def start_datetime(self):
        """Aware start datetime in the professional's time zone."""
        return datetime.combine(self.date, self.start_time, tzinfo=self.professional.tzinfo)

    @property
    def end_datetime(self):
        return self.start_datetime + timedelta(minutes=self.duration_minutes)
