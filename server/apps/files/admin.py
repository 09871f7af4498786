"""Django admin configuration for files app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.models import Attachment


def format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


@admin.register(Attachment)
class AttachmentAdmin(admin.ModelAdmin):
    """Admin interface for Attachment model."""

    list_display = [
        'filename_display',
        'blog',
        'size_display',
        'mime_type',
        'uploaded_at',
    ]

    list_filter = [
        'mime_type',
        'uploaded_at',
    ]

    search_fields = [
        'file',  # Searches file.name field
        'original_name',
        'blog__blog_name',
    ]

    readonly_fields = [
        'file',
        'size_bytes',
        'mime_type',
        'checksum_sha256',
        'uploaded_at',
    ]

    @admin.display(description='Filename')
    def filename_display(self, obj: Attachment) -> str:
        """Display filename extracted from file.name."""
        return obj.get_filename()

    @admin.display(description='Size')
    def size_display(self, obj: Attachment) -> str:
        """Display file size in human-readable format."""
        return format_bytes(obj.size_bytes)

    def get_queryset(self, request: HttpRequest) -> QuerySet[Attachment]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('blog')
