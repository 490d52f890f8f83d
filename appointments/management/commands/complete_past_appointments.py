"""
Management command to mark finished confirmed appointments as completed.

This command should be run periodically (e.g., nightly via cron) so the
history shows attended appointments as completed.
"""

from datetime import timedelta

from django.core.management.base import BaseCommand

from appointments.apps import get_facade
from appointments.exceptions import BookingError


class Command(BaseCommand):
    help = 'Mark confirmed appointments whose end time has passed as completed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the appointments that would be completed without changing them'
        )

    def handle(self, *args, **options):
        facade = get_facade()
        now = facade.ledger.clock()

        # end_datetime is the real filter; the date cutoff only narrows the query.
        cutoff = now.date() + timedelta(days=1)
        candidates = []
        for appointment in facade.store.confirmed_before(cutoff):
            try:
                ended = appointment.end_datetime <= now
            except BookingError as exc:
                self.stderr.write(f'Skipped appointment {appointment.pk}: {exc}')
                continue
            if ended:
                candidates.append(appointment)

        if options['dry_run']:
            for appointment in candidates:
                self.stdout.write(f'Would complete: {appointment}')
            self.stdout.write(f'{len(candidates)} appointment(s) would be completed')
            return

        completed = 0
        for appointment in candidates:
            try:
                facade.mark_completed(appointment.pk)
            except BookingError as exc:
                self.stderr.write(f'Skipped appointment {appointment.pk}: {exc}')
                continue
            completed += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully completed {completed} appointment(s)'
            )
        )
