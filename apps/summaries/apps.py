from django.apps import AppConfig


class SummariesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.summaries'

    def ready(self):
        # Connect cache invalidation receivers
        from . import signals  # noqa: F401
