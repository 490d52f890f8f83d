"""
Admin configuration for the appointments app.
"""

from django.contrib import admin
from .models import (
    Appointment,
    AppointmentType,
    Professional,
    TimeException,
    WeeklySchedule,
)


class WeeklyScheduleInline(admin.TabularInline):
    model = WeeklySchedule
    extra = 0
    max_num = 7


class AppointmentTypeInline(admin.TabularInline):
    model = AppointmentType
    extra = 0


@admin.register(Professional)
class ProfessionalAdmin(admin.ModelAdmin):
    """Admin interface for Professional model."""

    list_display = ['name', 'slug', 'timezone', 'instant_confirmation', 'is_active']
    list_filter = ['is_active', 'instant_confirmation']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [WeeklyScheduleInline, AppointmentTypeInline]


@admin.register(TimeException)
class TimeExceptionAdmin(admin.ModelAdmin):
    """Admin interface for TimeException model."""

    list_display = ['title', 'professional', 'type', 'start_date', 'end_date', 'start_time', 'end_time', 'recurrence']
    list_filter = ['type', 'recurrence', 'professional']
    search_fields = ['title']
    date_hierarchy = 'start_date'

    fieldsets = (
        ('Basic Information', {
            'fields': ('professional', 'title', 'type')
        }),
        ('Period', {
            'fields': ('start_date', 'end_date', 'start_time', 'end_time')
        }),
        ('Recurrence', {
            'fields': ('recurrence', 'weekdays')
        }),
    )


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    """
    Admin interface for Appointment model.

    Status is read-only here; changes go through the booking API so the
    transition rules and locking apply.
    """

    list_display = ['client_name', 'professional', 'date', 'start_time', 'duration_minutes', 'status', 'payment_status']
    list_filter = ['status', 'payment_status', 'location', 'professional']
    search_fields = ['client_name', 'client_email', 'client_phone']
    date_hierarchy = 'date'

    fieldsets = (
        ('Client', {
            'fields': ('client_name', 'client_email', 'client_phone', 'urgency', 'notes')
        }),
        ('Schedule', {
            'fields': ('professional', 'appointment_type', 'date', 'start_time', 'duration_minutes', 'location')
        }),
        ('Status', {
            'fields': ('status', 'payment_status', 'rescheduled_from')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    readonly_fields = ['status', 'rescheduled_from', 'created_at', 'updated_at']
