"""
DRF exception handler for the booking error taxonomy.
"""

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import BookingError, ConfigurationError


logger = logging.getLogger(__name__)


def booking_exception_handler(exc, context):
    """Render BookingError subclasses; defer everything else to DRF."""
    if not isinstance(exc, BookingError):
        return exception_handler(exc, context)

    if isinstance(exc, ConfigurationError):
        logger.error("Configuration error: %s %s", exc, exc.context)

    return Response(
        {'error': exc.code, 'detail': exc.message},
        status=exc.status_code,
    )
