from django.apps import AppConfig
from django.conf import settings


class WidgetsConfig(AppConfig):
    name = 'apps.widgets'
    label = 'widgets'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        from infrastructure.bootstrap import start_container
        from infrastructure.logging import configure_logging
        from . import checks  # noqa: F401

        if getattr(settings, 'CONFIGURE_LOGGING', True):
            configure_logging(is_production=settings.LOG_JSON, level=settings.LOG_LEVEL)

        start_container()
