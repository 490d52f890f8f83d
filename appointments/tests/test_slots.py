"""
Tests for free-window computation and slot generation.
"""

from datetime import date, datetime, time, timezone

from django.test import TestCase

from appointments import slots
from appointments.models import TimeException
from appointments.store import AppointmentStore

from .factories import (
    MONDAY,
    NOW,
    SAO_PAULO,
    SATURDAY,
    book,
    create_exception,
    create_professional,
    create_type,
    create_week,
    slot_times,
)


class SlotGenerationTests(TestCase):
    """Test the slot grid for a 09:00-18:00 day with a 12:00-13:00 break."""

    def setUp(self):
        self.store = AppointmentStore()
        self.professional = create_professional()
        create_week(self.professional)
        self.hour = create_type(self.professional, 'Initial consultation', 60)
        self.half_hour = create_type(self.professional, 'Follow-up', 30)

    def generate(self, duration, on_date=MONDAY, now=NOW, step=30):
        return slots.generate_slots(
            self.professional, on_date, self.store,
            duration_minutes=duration, step=step, now=now,
        )

    def test_plain_day(self):
        """Test hour-long slots on a day without exceptions or bookings."""
        result = self.generate(60)

        self.assertEqual(
            slot_times(result),
            ['09:00', '09:30', '10:00', '10:30', '11:00',
             '13:00', '13:30', '14:00', '14:30', '15:00', '15:30', '16:00', '16:30', '17:00']
        )
        self.assertTrue(all(slot.available for slot in result))
        self.assertEqual(result[0].end_time, '10:00')
        self.assertEqual(result[-1].end_time, '18:00')

    def test_no_slot_crosses_break(self):
        """Test that the break is never straddled."""
        for slot in self.generate(60):
            self.assertTrue(slot.end <= 720 or slot.start >= 780)

    def test_meeting_removes_overlapping_slots(self):
        """Test that a one-off meeting blocks every slot it overlaps."""
        create_exception(self.professional, time(10, 0), time(11, 0))

        times = slot_times(self.generate(60))

        self.assertIn('09:00', times)
        self.assertNotIn('09:30', times)
        self.assertNotIn('10:00', times)
        self.assertNotIn('10:30', times)
        self.assertIn('11:00', times)
        self.assertIn('13:00', times)

    def test_booked_appointment_blocks_its_window(self):
        """Test that a confirmed booking removes exactly its half hour."""
        book(self.professional, self.half_hour, MONDAY, time(14, 0))

        times = slot_times(self.generate(30))

        self.assertIn('13:30', times)
        self.assertNotIn('14:00', times)
        self.assertIn('14:30', times)

    def test_non_blocking_statuses_do_not_block(self):
        """Test that cancelled, no-show and rescheduled appointments free their window."""
        for status in ('cancelled', 'no_show', 'rescheduled'):
            book(self.professional, self.half_hour, MONDAY, time(14, 0), status=status)

        self.assertIn('14:00', slot_times(self.generate(30)))

    def test_completed_appointment_still_blocks(self):
        """Test that a completed appointment keeps its window."""
        book(self.professional, self.half_hour, MONDAY, time(14, 0), status='completed')

        self.assertNotIn('14:00', slot_times(self.generate(30)))

    def test_full_day_exception_wins_over_schedule(self):
        """Test that a vacation covering opening hours leaves no slots of any length."""
        create_exception(
            self.professional, time(8, 0), time(19, 0),
            title='Vacation', type='vacation',
        )

        for duration in (15, 30, 60, 120):
            self.assertEqual(self.generate(duration), [])

    def test_closed_day_has_no_slots(self):
        """Test that a closed weekday yields nothing."""
        self.assertEqual(self.generate(30, on_date=SATURDAY), [])

    def test_weekly_exception_applies_only_on_its_weekdays(self):
        """Test a recurring Monday afternoon block."""
        create_exception(
            self.professional, time(13, 0), time(18, 0),
            start_date=MONDAY, end_date=date(2025, 6, 30),
            recurrence=TimeException.RECURRENCE_WEEKLY, weekdays=[0],
        )

        monday = slot_times(self.generate(60))
        tuesday = slot_times(self.generate(60, on_date=date(2025, 3, 11)))

        self.assertEqual(monday, ['09:00', '09:30', '10:00', '10:30', '11:00'])
        self.assertIn('13:00', tuesday)

    def test_grid_is_aligned_to_step(self):
        """Test that free time after an odd-length booking starts at the next grid line."""
        odd = create_type(self.professional, 'Quick call', 45)
        book(self.professional, odd, MONDAY, time(9, 0))

        times = slot_times(self.generate(30))

        self.assertEqual(times[0], '10:00')
        self.assertNotIn('09:45', times)

    def test_past_slots_are_unavailable(self):
        """Test that slots starting at or before now are flagged unavailable."""
        now = datetime(2025, 3, 10, 10, 0, tzinfo=SAO_PAULO)

        result = {slot.start_time: slot.available for slot in self.generate(30, now=now)}

        self.assertFalse(result['09:00'])
        self.assertFalse(result['10:00'])
        self.assertTrue(result['10:30'])
        self.assertTrue(result['17:30'])

    def test_now_in_other_zone_is_converted(self):
        """Test that now is compared in the professional's time zone."""
        # 13:00 UTC is 10:00 in Sao Paulo.
        now = datetime(2025, 3, 10, 13, 0, tzinfo=timezone.utc)

        result = {slot.start_time: slot.available for slot in self.generate(30, now=now)}

        self.assertFalse(result['10:00'])
        self.assertTrue(result['10:30'])

    def test_generation_is_deterministic(self):
        """Test that two queries with no writes in between agree."""
        book(self.professional, self.hour, MONDAY, time(15, 0))
        self.assertEqual(self.generate(60), self.generate(60))

    def test_free_windows_exclude_appointment(self):
        """Test ignoring one appointment when computing free windows."""
        appointment = book(self.professional, self.hour, MONDAY, time(10, 0))

        self.assertEqual(
            slots.free_windows(self.professional, MONDAY, self.store),
            [(540, 600), (660, 720), (780, 1080)]
        )
        self.assertEqual(
            slots.free_windows(self.professional, MONDAY, self.store, exclude_id=appointment.pk),
            [(540, 720), (780, 1080)]
        )

    def test_first_grid_start(self):
        """Test rounding window starts up to the grid."""
        self.assertEqual(slots.first_grid_start(540, 30), 540)
        self.assertEqual(slots.first_grid_start(585, 30), 600)
        self.assertEqual(slots.first_grid_start(601, 15), 615)
