"""Database models for files app."""

from pathlib import Path
from typing import ClassVar, Final, final, override

from django.db import models

from server.apps.blogs.models import Blog

# Constants for field max lengths
_MIME_TYPE_MAX_LENGTH: Final = 255
_CHECKSUM_MAX_LENGTH: Final = 64  # SHA256 hex length
_ORIGINAL_NAME_MAX_LENGTH: Final = 255


@final
class Attachment(models.Model):
    """Uploaded file stored in S3-compatible storage.

    Each attachment belongs to a blog and lives under the storage
    key ``{blog_id}/filename.ext``. Posts reference attachments
    through an ordered relation; the bytes stay here.
    """

    # Owner relationship
    blog = models.ForeignKey(
        Blog,
        on_delete=models.CASCADE,
        related_name='attachments',
        db_index=True,
    )

    # upload_to='' means we control the full path
    file = models.FileField(
        upload_to='',
        max_length=255,
        help_text='Path in storage: {blog_id}/file.ext',
    )

    original_name = models.CharField(
        max_length=_ORIGINAL_NAME_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Filename as uploaded by the client',
    )

    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
    )

    checksum_sha256 = models.CharField(
        max_length=_CHECKSUM_MAX_LENGTH,
        help_text='SHA256 hash for integrity verification',
    )

    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Attachment'  # type: ignore[mutable-override]
        verbose_name_plural = 'Attachments'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-uploaded_at']

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.UniqueConstraint(
                fields=['blog', 'file'],
                name='attachments_blog_path_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.blog.blog_name}:{self.file.name}'

    def get_filename(self) -> str:
        """Extract filename from file.name.

        Example: '12/cat.png' -> 'cat.png'
        """
        return Path(self.file.name).name

    def get_extension(self) -> str:
        """Extract file extension, lowercase and without the dot."""
        extension = Path(self.file.name).suffix
        return extension.lstrip('.').lower()

    def get_url(self) -> str:
        """Get download URL for the attachment.

        Returns:
            Full URL to access file via storage backend.
        """
        return self.file.url
