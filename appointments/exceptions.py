"""
Error taxonomy for the availability and booking engine.

Every error carries an HTTP-ish ``status_code`` and a short machine ``code``
so the API layer can render it without inspecting the message.
"""


class BookingError(Exception):
    """Base class for all engine errors."""

    status_code = 400
    code = 'booking_error'

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self):
        return self.message


class ValidationError(BookingError):
    """Malformed or out-of-range input the caller can correct."""

    code = 'invalid'


class InvalidTransitionError(ValidationError):
    """The appointment's current status does not allow the requested move."""

    status_code = 409
    code = 'invalid_transition'


class ConflictError(BookingError):
    """The requested slot is no longer free at commit time."""

    status_code = 409
    code = 'conflict'


class NotFoundError(BookingError):
    """An appointment or professional id does not exist."""

    status_code = 404
    code = 'not_found'


class ConfigurationError(BookingError):
    """Schedule or exception data violates its own invariants."""

    status_code = 500
    code = 'configuration_error'
