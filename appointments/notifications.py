"""
Outbound booking notifications.

Delivery happens after the ledger write has committed. A failing notifier is
logged and never undoes the booking.
"""

import atexit
import logging
from concurrent.futures import ThreadPoolExecutor

from django.utils.module_loading import import_string

from .types import BookingEvent


logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Default notifier: records the event in the application log."""

    def send(self, event: BookingEvent) -> None:
        logger.info(
            "Booking event %s for appointment %s (professional %s, client %s)",
            event.event,
            event.appointment_id,
            event.professional_id,
            event.client_email,
        )


class NotificationDispatcher:
    """Hands events to a notifier, optionally on a worker thread."""

    def __init__(self, notifier, executor=None):
        self.notifier = notifier
        self.executor = executor

    @classmethod
    def from_config(cls, config):
        notifier = import_string(config.notifier)()
        if not config.notify_async:
            return cls(notifier)

        dispatcher = cls(
            notifier,
            ThreadPoolExecutor(max_workers=2, thread_name_prefix='booking-notify'),
        )
        # Queued events are delivered before the interpreter exits.
        atexit.register(dispatcher.shutdown)
        return dispatcher

    def dispatch(self, event: BookingEvent) -> None:
        if self.executor is not None:
            self.executor.submit(self._deliver, event)
        else:
            self._deliver(event)

    def shutdown(self) -> None:
        """Wait for queued deliveries and stop the worker threads."""
        if self.executor is not None:
            self.executor.shutdown(wait=True)

    def _deliver(self, event: BookingEvent) -> None:
        try:
            self.notifier.send(event)
        except Exception:
            logger.exception(
                "Notifier failed for %s event on appointment %s",
                event.event,
                event.appointment_id,
            )
