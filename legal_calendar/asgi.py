"""
ASGI config for legal_calendar project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'legal_calendar.settings')

application = get_asgi_application()
