"""Business logic for attachment file operations."""

import logging
from typing import TYPE_CHECKING, BinaryIO

from django.core.files.base import File as DjangoFile
from django.core.files.storage import default_storage
from django.db import transaction

from server.apps.blogs.models import Blog
from server.apps.files.exceptions import AttachmentNotFoundError
from server.apps.files.infrastructure.metadata import (
    build_storage_path,
    calculate_checksum,
    detect_mime_type,
    get_file_size,
    validate_storage_path,
)
from server.apps.files.models import Attachment

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import FileStorage

logger = logging.getLogger(__name__)


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def create_file(file_obj: BinaryIO | DjangoFile, blog: Blog) -> Attachment:
    """Upload an attachment to storage and create its database record.

    Transaction safety: upload to storage first, then create the DB
    record. If the DB write fails, the uploaded object is deleted
    from storage (rollback).

    Args:
        file_obj: Uploaded file (Django ``UploadedFile`` or file-like).
        blog: Owning blog.

    Returns:
        Created Attachment instance.

    Raises:
        ValidationError: If storage path validation fails.
        Exception: If upload or DB operation fails.
    """
    original_name = getattr(file_obj, 'name', '') or ''
    storage_path = build_storage_path(blog.id, original_name)
    validate_storage_path(blog.id, storage_path)

    checksum = calculate_checksum(file_obj)
    mime_type = detect_mime_type(
        storage_path,
        getattr(file_obj, 'content_type', None),
    )
    file_size = get_file_size(file_obj)

    storage = _get_storage()

    # Step 1: Upload to storage first
    saved_name = storage.save(storage_path, file_obj)

    # Step 2: Create database record
    try:
        with transaction.atomic():
            attachment = Attachment.objects.create(
                blog=blog,
                file=saved_name,
                original_name=original_name[:255],
                size_bytes=file_size,
                mime_type=mime_type,
                checksum_sha256=checksum,
            )
    except Exception:
        logger.exception(
            'Database transaction failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise

    logger.info(
        'Attachment created: %s (ID: %d)',
        saved_name,
        attachment.id,
    )
    return attachment


def get_file(file_id: int) -> Attachment:
    """Get attachment by id.

    Args:
        file_id: Attachment primary key.

    Returns:
        Attachment instance.

    Raises:
        AttachmentNotFoundError: If attachment doesn't exist.
    """
    try:
        return Attachment.objects.select_related('blog').get(id=file_id)
    except Attachment.DoesNotExist as error:
        raise AttachmentNotFoundError(file_id) from error


def delete_file(file_id: int) -> None:
    """Delete attachment from database and storage.

    Deletes the DB record; storage cleanup is handled by the
    post_delete signal handler in signals.py.

    Args:
        file_id: ID of attachment to delete.

    Raises:
        AttachmentNotFoundError: If attachment doesn't exist.
    """
    attachment = get_file(file_id)
    storage_name = attachment.file.name

    try:
        with transaction.atomic():
            attachment.delete()
    except Exception:
        logger.exception(
            'Failed to delete attachment from database: ID=%d',
            file_id,
        )
        raise

    logger.info(
        'Attachment deleted: ID=%d, path=%s',
        file_id,
        storage_name,
    )
