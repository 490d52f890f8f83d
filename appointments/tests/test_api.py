"""
Tests for the booking API endpoints.
"""

from datetime import time, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from appointments.models import Appointment, Professional

from .factories import (
    SAO_PAULO,
    book,
    create_professional,
    create_type,
    create_week,
)


def upcoming_monday():
    """A Monday one to two weeks from today."""
    today = timezone.now().astimezone(SAO_PAULO).date()
    return today + timedelta(days=7 + (7 - today.weekday()) % 7)


class BookingAPITestCase(APITestCase):

    def setUp(self):
        self.professional = create_professional()
        create_week(self.professional)
        self.hour = create_type(self.professional, 'Initial consultation', 60)
        self.monday = upcoming_monday()

    def reserve(self, start_time='10:00', on_date=None, **extra):
        data = {
            'date': (on_date or self.monday).isoformat(),
            'start_time': start_time,
            'appointment_type': self.hour.pk,
            'client_name': 'João Silva',
            'client_email': 'joao@example.com',
        }
        data.update(extra)
        url = reverse('professional-appointments', args=[self.professional.pk])
        return self.client.post(url, data, format='json')

    def slots(self, on_date=None, **params):
        params.setdefault('date', (on_date or self.monday).isoformat())
        url = reverse('slot-list', args=[self.professional.pk])
        return self.client.get(url, params)


class SlotAPITests(BookingAPITestCase):
    """Test GET /api/professionals/{id}/slots/."""

    def test_list_slots(self):
        """Test listing hour-long slots for a working Monday."""
        response = self.slots(appointment_type=self.hour.pk)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 14)
        self.assertEqual(response.data[0]['start_time'], '09:00')
        self.assertEqual(response.data[0]['end_time'], '10:00')
        self.assertEqual(response.data[0]['duration_minutes'], 60)
        self.assertTrue(response.data[0]['available'])

    def test_missing_date(self):
        """Test that the date parameter is required."""
        url = reverse('slot-list', args=[self.professional.pk])
        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date', response.data)

    def test_unknown_professional(self):
        """Test 404 for an unknown professional."""
        url = reverse('slot-list', args=[9999])
        response = self.client.get(url, {'date': self.monday.isoformat()})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'not_found')

    def test_unknown_appointment_type(self):
        """Test 400 for an unknown appointment type."""
        response = self.slots(appointment_type=9999)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid')

    def test_date_out_of_range(self):
        """Test 400 for a date beyond the booking horizon."""
        response = self.slots(on_date=self.monday + timedelta(days=400))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_professional(self):
        """Test that a professional not taking bookings lists no slots."""
        self.professional.is_active = False
        self.professional.save()

        response = self.slots(appointment_type=self.hour.pk)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_broken_time_zone(self):
        """Test 500 for a professional stored with an unknown zone."""
        Professional.objects.filter(pk=self.professional.pk).update(timezone='Mars/Base')

        with self.assertLogs('appointments.handlers', level='ERROR'):
            response = self.slots()

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'configuration_error')


class ReserveAPITests(BookingAPITestCase):
    """Test POST /api/professionals/{id}/appointments/."""

    def test_reserve(self):
        """Test booking a free slot."""
        response = self.reserve(location='online', urgency='high', notes='Labour claim')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['start_time'], '10:00')
        self.assertEqual(response.data['duration_minutes'], 60)
        self.assertEqual(response.data['appointment_type_name'], 'Initial consultation')
        self.assertEqual(response.data['location'], 'online')
        self.assertIsNone(response.data['rescheduled_from'])

    def test_reserve_taken_slot(self):
        """Test 409 when the slot was taken in between."""
        self.reserve()
        response = self.reserve(client_name='Maria Lima', client_email='maria@example.com')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'conflict')
        self.assertEqual(Appointment.objects.count(), 1)

    def test_reserve_removes_slot(self):
        """Test that a booked slot is no longer listed."""
        self.reserve('14:00')

        times = [slot['start_time'] for slot in self.slots(appointment_type=self.hour.pk).data]

        self.assertNotIn('14:00', times)
        self.assertNotIn('13:30', times)
        self.assertIn('15:00', times)

    def test_reserve_bad_payload(self):
        """Test 400 for malformed input."""
        response = self.reserve(start_time='10am', client_email='nope')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('start_time', response.data)
        self.assertIn('client_email', response.data)

    def test_reserve_in_past(self):
        """Test 400 for a start that has already passed."""
        yesterday = timezone.now().astimezone(SAO_PAULO).date() - timedelta(days=1)

        response = self.reserve(on_date=yesterday)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid')


class AppointmentAPITests(BookingAPITestCase):
    """Test appointment detail, transitions and listing."""

    def setUp(self):
        super().setUp()
        self.appointment_id = self.reserve().data['id']

    def post(self, name, **data):
        url = reverse(name, args=[self.appointment_id])
        return self.client.post(url, data, format='json')

    def test_detail(self):
        """Test retrieving an appointment."""
        response = self.client.get(reverse('appointment-detail', args=[self.appointment_id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['client_email'], 'joao@example.com')

    def test_detail_not_found(self):
        """Test 404 for an unknown appointment."""
        response = self.client.get(reverse('appointment-detail', args=[9999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'not_found')

    def test_confirm(self):
        """Test confirming and the invalid second confirmation."""
        response = self.post('appointment-confirm')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'confirmed')

        response = self.post('appointment-confirm')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'invalid_transition')

    def test_cancel_frees_slot(self):
        """Test that cancelling lists the slot again."""
        response = self.post('appointment-cancel')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')
        times = [slot['start_time'] for slot in self.slots(appointment_type=self.hour.pk).data]
        self.assertIn('10:00', times)

    def test_complete_before_end(self):
        """Test 400 when completing an appointment that has not happened yet."""
        self.post('appointment-confirm')

        response = self.post('appointment-complete')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'invalid')

    def test_complete_past_appointment(self):
        """Test completing a confirmed appointment that has ended."""
        past = book(
            self.professional, self.hour,
            timezone.now().astimezone(SAO_PAULO).date() - timedelta(days=2), time(9, 0),
        )

        response = self.client.post(reverse('appointment-complete', args=[past.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'completed')

    def test_no_show(self):
        """Test marking a confirmed appointment as no-show."""
        self.post('appointment-confirm')

        response = self.post('appointment-no-show')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'no_show')

    def test_reschedule(self):
        """Test moving an appointment to another day."""
        tuesday = self.monday + timedelta(days=1)

        response = self.post('appointment-reschedule', date=tuesday.isoformat(), start_time='15:00')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['rescheduled_from'], self.appointment_id)
        self.assertEqual(response.data['date'], tuesday.isoformat())
        self.assertEqual(response.data['start_time'], '15:00')
        self.assertEqual(Appointment.objects.get(pk=self.appointment_id).status, 'rescheduled')

    def test_reschedule_into_break(self):
        """Test 409 when the new slot runs into the lunch break."""
        response = self.post(
            'appointment-reschedule', date=self.monday.isoformat(), start_time='11:30'
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'conflict')

    def test_list_with_filters(self):
        """Test the dashboard listing with a status filter."""
        self.reserve('15:00', client_name='Maria Lima', client_email='maria@example.com')
        self.post('appointment-confirm')
        url = reverse('professional-appointments', args=[self.professional.pk])

        everything = self.client.get(url)
        confirmed = self.client.get(url, {'status': 'confirmed'})
        searched = self.client.get(url, {'search': 'maria'})

        self.assertEqual(len(everything.data), 2)
        self.assertEqual([item['id'] for item in confirmed.data], [self.appointment_id])
        self.assertEqual([item['client_name'] for item in searched.data], ['Maria Lima'])

    def test_list_with_inverted_range(self):
        """Test 400 for date_from after date_to."""
        url = reverse('professional-appointments', args=[self.professional.pk])

        response = self.client.get(url, {
            'date_from': self.monday.isoformat(),
            'date_to': (self.monday - timedelta(days=1)).isoformat(),
        })

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
