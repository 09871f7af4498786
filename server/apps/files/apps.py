"""Django app configuration for the attachment file store."""

from typing import override

from django.apps import AppConfig


class FilesConfig(AppConfig):
    """Attachment storage: metadata rows plus bytes in S3."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.files'
    verbose_name = 'Attachments'

    @override
    def ready(self) -> None:
        """Connect the storage cleanup handler for deleted attachments."""
        from server.apps.files import signals  # noqa: F401
