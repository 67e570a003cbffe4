"""Django app configuration for languages app."""

from django.apps import AppConfig


class LanguagesConfig(AppConfig):
    """Configuration for languages app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.languages'
    verbose_name = 'Languages'
