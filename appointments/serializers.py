"""
Serializers for the booking API.
"""

from rest_framework import serializers

from .models import Appointment
from .states import AppointmentStatus
from .types import AppointmentFilters, ClientInfo


class SlotSerializer(serializers.Serializer):
    """Serializer for a derived Slot (output)."""

    date = serializers.DateField()
    start_time = serializers.CharField()
    end_time = serializers.CharField()
    duration_minutes = serializers.IntegerField()
    available = serializers.BooleanField()


class SlotQuerySerializer(serializers.Serializer):
    """Serializer for slot listing query parameters."""

    date = serializers.DateField()
    appointment_type = serializers.IntegerField(required=False, allow_null=True)


class AppointmentReadSerializer(serializers.ModelSerializer):
    """Serializer for reading/displaying Appointment (output)."""

    start_time = serializers.TimeField(format='%H:%M')
    appointment_type_name = serializers.CharField(source='appointment_type.name', read_only=True)
    rescheduled_from = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id',
            'professional',
            'appointment_type',
            'appointment_type_name',
            'client_name',
            'client_email',
            'client_phone',
            'date',
            'start_time',
            'duration_minutes',
            'location',
            'urgency',
            'notes',
            'status',
            'payment_status',
            'rescheduled_from',
            'created_at',
            'updated_at',
        ]


class ReserveSerializer(serializers.Serializer):
    """Serializer for a booking request."""

    date = serializers.DateField()
    start_time = serializers.TimeField(input_formats=['%H:%M'])
    appointment_type = serializers.IntegerField()
    client_name = serializers.CharField(max_length=200)
    client_email = serializers.EmailField()
    client_phone = serializers.CharField(max_length=40, required=False, allow_blank=True, default='')
    location = serializers.ChoiceField(choices=Appointment.LOCATION_CHOICES, default='office')
    urgency = serializers.ChoiceField(choices=Appointment.URGENCY_CHOICES, default='medium')
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def to_client(self) -> ClientInfo:
        data = self.validated_data
        return ClientInfo(
            name=data['client_name'],
            email=data['client_email'],
            phone=data['client_phone'],
            location=data['location'],
            urgency=data['urgency'],
            notes=data['notes'],
        )


class RescheduleSerializer(serializers.Serializer):
    """Serializer for moving an appointment."""

    date = serializers.DateField()
    start_time = serializers.TimeField(input_formats=['%H:%M'])


class AppointmentFilterSerializer(serializers.Serializer):
    """Serializer for appointment list query parameters."""

    status = serializers.ChoiceField(choices=AppointmentStatus.choices, required=False)
    appointment_type = serializers.IntegerField(required=False)
    location = serializers.ChoiceField(choices=Appointment.LOCATION_CHOICES, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        """Ensure date_from is not after date_to."""
        if data.get('date_from') and data.get('date_to') and data['date_from'] > data['date_to']:
            raise serializers.ValidationError("date_from must not be after date_to.")
        return data

    def to_filters(self) -> AppointmentFilters:
        data = self.validated_data
        return AppointmentFilters(
            status=data.get('status'),
            appointment_type_id=data.get('appointment_type'),
            location=data.get('location'),
            date_from=data.get('date_from'),
            date_to=data.get('date_to'),
            search=data.get('search') or None,
        )
