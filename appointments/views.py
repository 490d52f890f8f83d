"""Views for the booking API."""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .apps import get_facade
from .serializers import (
    AppointmentFilterSerializer,
    AppointmentReadSerializer,
    RescheduleSerializer,
    ReserveSerializer,
    SlotQuerySerializer,
    SlotSerializer,
)


class SlotListView(APIView):
    """
    List bookable slots of a professional for one date.

    GET /api/professionals/{id}/slots/?date=YYYY-MM-DD&appointment_type={id}
    """

    def get(self, request, professional_id):
        """List the slot grid for a date."""
        query = SlotQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        slots = get_facade().list_slots(
            professional_id,
            query.validated_data['date'],
            query.validated_data.get('appointment_type'),
        )
        return Response(SlotSerializer(slots, many=True).data)


class ProfessionalAppointmentsView(APIView):
    """
    List a professional's appointments or book a new one.

    GET /api/professionals/{id}/appointments/ - List with filters
    POST /api/professionals/{id}/appointments/ - Reserve a slot
    """

    def get(self, request, professional_id):
        """List appointments matching the query filters."""
        query = AppointmentFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        appointments = get_facade().list_appointments(professional_id, query.to_filters())
        return Response(AppointmentReadSerializer(appointments, many=True).data)

    def post(self, request, professional_id):
        """Reserve a slot for a client."""
        serializer = ReserveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        appointment = get_facade().reserve(
            professional_id,
            data['date'],
            data['start_time'],
            data['appointment_type'],
            serializer.to_client(),
        )
        return Response(AppointmentReadSerializer(appointment).data, status=status.HTTP_201_CREATED)


class AppointmentDetailView(APIView):
    """
    Retrieve an appointment.

    GET /api/appointments/{id}/
    """

    def get(self, request, pk):
        appointment = get_facade().get_appointment(pk)
        return Response(AppointmentReadSerializer(appointment).data)


class AppointmentTransitionView(APIView):
    """
    Apply a status change to an appointment.

    POST /api/appointments/{id}/confirm/
    POST /api/appointments/{id}/cancel/
    POST /api/appointments/{id}/complete/
    POST /api/appointments/{id}/no-show/
    """

    operation = None

    def post(self, request, pk):
        operation = getattr(get_facade(), self.operation)
        appointment = operation(pk)
        return Response(AppointmentReadSerializer(appointment).data)


class AppointmentRescheduleView(APIView):
    """
    Move an appointment to another slot.

    POST /api/appointments/{id}/reschedule/
    """

    def post(self, request, pk):
        """Reschedule and return the replacement appointment."""
        serializer = RescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        replacement = get_facade().reschedule(
            pk,
            serializer.validated_data['date'],
            serializer.validated_data['start_time'],
        )
        return Response(AppointmentReadSerializer(replacement).data, status=status.HTTP_201_CREATED)
