from django.apps import AppConfig


class AppointmentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'appointments'
    verbose_name = 'Appointments'

    def ready(self):
        from .facade import BookingFacade

        # One facade per process so every request shares the same professional locks.
        self.facade = BookingFacade.from_settings()


def get_facade():
    """Return the process-wide BookingFacade owned by this app."""
    from django.apps import apps

    return apps.get_app_config('appointments').facade
