"""
Tests for interval arithmetic and the status transition table.
"""

from datetime import time

from django.test import SimpleTestCase

from appointments.exceptions import InvalidTransitionError
from appointments.intervals import (
    contains,
    format_minutes,
    from_minutes,
    intersect,
    overlaps,
    parse_hhmm,
    subtract,
    to_minutes,
)
from appointments.states import (
    BLOCKING_STATUSES,
    TERMINAL_STATUSES,
    AppointmentStatus,
    check_transition,
    is_terminal,
)


class MinuteConversionTests(SimpleTestCase):
    """Test conversions between times and minutes since midnight."""

    def test_to_minutes(self):
        """Test converting a time to minutes."""
        self.assertEqual(to_minutes(time(0, 0)), 0)
        self.assertEqual(to_minutes(time(9, 30)), 570)
        self.assertEqual(to_minutes(time(23, 59, 59)), 1439)

    def test_from_minutes(self):
        """Test converting minutes back to a time."""
        self.assertEqual(from_minutes(570), time(9, 30))
        with self.assertRaises(ValueError):
            from_minutes(1440)
        with self.assertRaises(ValueError):
            from_minutes(-1)

    def test_format_minutes(self):
        """Test HH:MM rendering, including end of day."""
        self.assertEqual(format_minutes(540), '09:00')
        self.assertEqual(format_minutes(1440), '24:00')

    def test_parse_hhmm(self):
        """Test parsing HH:MM strings."""
        self.assertEqual(parse_hhmm('14:30'), 870)
        self.assertEqual(parse_hhmm(' 09:05 '), 545)
        for bad in ('24:00', '9', '10:60', 'ab:cd', '', None):
            with self.assertRaises(ValueError):
                parse_hhmm(bad)


class IntervalOperationTests(SimpleTestCase):
    """Test overlap, intersection, containment and subtraction."""

    def test_touching_intervals_do_not_overlap(self):
        """Test that half-open intervals sharing an endpoint are disjoint."""
        self.assertFalse(overlaps((540, 600), (600, 660)))
        self.assertTrue(overlaps((540, 601), (600, 660)))

    def test_intersect(self):
        """Test intersecting intervals."""
        self.assertEqual(intersect((540, 720), (600, 780)), (600, 720))
        self.assertIsNone(intersect((540, 600), (600, 660)))

    def test_contains(self):
        """Test containment including shared edges."""
        self.assertTrue(contains((540, 720), (540, 720)))
        self.assertTrue(contains((540, 720), (600, 660)))
        self.assertFalse(contains((540, 720), (690, 750)))

    def test_subtract_splits_window(self):
        """Test that a removal inside a window splits it."""
        self.assertEqual(
            subtract([(540, 1080)], [(720, 780)]),
            [(540, 720), (780, 1080)]
        )

    def test_subtract_multiple_removals(self):
        """Test subtracting unsorted, overlapping removals from several windows."""
        result = subtract(
            [(780, 1080), (540, 720)],
            [(840, 870), (600, 660), (630, 700), (1000, 1200)]
        )
        self.assertEqual(result, [(540, 600), (700, 720), (780, 840), (870, 1000)])

    def test_subtract_ignores_empty_and_outside_removals(self):
        """Test that empty removals and removals outside the windows change nothing."""
        self.assertEqual(subtract([(540, 720)], [(600, 600), (0, 540), (720, 800)]), [(540, 720)])

    def test_subtract_removing_everything(self):
        """Test that a covering removal leaves nothing."""
        self.assertEqual(subtract([(540, 720), (780, 1080)], [(480, 1140)]), [])


class TransitionTableTests(SimpleTestCase):
    """Test the appointment status machine."""

    def test_allowed_transitions(self):
        """Test every legal move."""
        legal = [
            ('pending', 'confirmed'),
            ('pending', 'cancelled'),
            ('pending', 'rescheduled'),
            ('confirmed', 'completed'),
            ('confirmed', 'cancelled'),
            ('confirmed', 'no_show'),
            ('confirmed', 'rescheduled'),
        ]
        for current, target in legal:
            check_transition(current, target)

    def test_illegal_transitions(self):
        """Test that everything outside the table is rejected."""
        legal = {
            ('pending', 'confirmed'),
            ('pending', 'cancelled'),
            ('pending', 'rescheduled'),
            ('confirmed', 'completed'),
            ('confirmed', 'cancelled'),
            ('confirmed', 'no_show'),
            ('confirmed', 'rescheduled'),
        }
        for current in AppointmentStatus.values:
            for target in AppointmentStatus.values:
                if (current, target) in legal:
                    continue
                with self.assertRaises(InvalidTransitionError) as ctx:
                    check_transition(current, target)
                self.assertEqual(ctx.exception.context['current'], current)
                self.assertEqual(ctx.exception.context['target'], target)

    def test_terminal_statuses(self):
        """Test which statuses are terminal."""
        self.assertEqual(
            set(TERMINAL_STATUSES),
            {'completed', 'cancelled', 'no_show', 'rescheduled'}
        )
        self.assertTrue(is_terminal('cancelled'))
        self.assertFalse(is_terminal('pending'))

    def test_blocking_statuses(self):
        """Test that only pending, confirmed and completed hold their window."""
        self.assertEqual(set(BLOCKING_STATUSES), {'pending', 'confirmed', 'completed'})
