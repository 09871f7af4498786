"""Django app configuration for blogs app."""

from typing import override

from django.apps import AppConfig


class BlogsConfig(AppConfig):
    """Configuration for blogs app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.blogs'
    verbose_name = 'Blogs'

    @override
    def ready(self) -> None:
        """Import signal handlers when app is ready."""
        from server.apps.blogs import signals  # noqa: F401
