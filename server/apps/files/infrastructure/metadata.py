"""Metadata extraction utilities for attachments."""

import hashlib
import mimetypes
from pathlib import Path
from typing import BinaryIO, Final

from django.core.exceptions import SuspiciousFileOperation, ValidationError
from django.utils.text import get_valid_filename

_CHUNK_SIZE: Final = 8192  # 8KB chunks for checksum calculation
_DEFAULT_FILENAME: Final = 'attachment'
_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'


def detect_mime_type(filename: str, content_type: str | None = None) -> str:
    """Detect MIME type of an upload.

    The extension decides; the client-declared content type is only
    used when the extension is unknown.

    Args:
        filename: Filename with extension.
        content_type: Content type sent by the client, if any.

    Returns:
        MIME type string, 'application/octet-stream' when unknown.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is not None:
        return mime_type
    return content_type or _DEFAULT_MIME_TYPE


def calculate_checksum(file_obj: BinaryIO) -> str:
    """Calculate SHA256 checksum of file.

    Reads file in chunks and resets the file pointer afterwards.

    Args:
        file_obj: File-like object to checksum.

    Returns:
        Hex-encoded SHA256 hash string.
    """
    sha256_hash = hashlib.sha256()

    file_obj.seek(0)
    for chunk in iter(lambda: file_obj.read(_CHUNK_SIZE), b''):
        sha256_hash.update(chunk)
    file_obj.seek(0)

    return sha256_hash.hexdigest()


def get_file_size(file_obj: BinaryIO) -> int:
    """Get file size from file object."""
    size = getattr(file_obj, 'size', None)
    if size is not None:
        return size
    file_size = len(file_obj.read())
    file_obj.seek(0)
    return file_size


def build_storage_path(blog_id: int, filename: str | None) -> str:
    """Build the storage key of an attachment.

    Example: (12, 'my cat.png') -> '12/my_cat.png'

    Args:
        blog_id: Owning blog id.
        filename: Client-supplied filename, may be empty.

    Returns:
        Storage path starting with the blog id.
    """
    name = Path(filename or '').name
    try:
        safe_name = get_valid_filename(name)
    except SuspiciousFileOperation:
        safe_name = _DEFAULT_FILENAME
    return f'{blog_id}/{safe_name}'


def validate_storage_path(blog_id: int, storage_path: str) -> None:
    """Validate storage path follows blog isolation rules.

    Args:
        blog_id: Owning blog id.
        storage_path: Proposed storage path.

    Raises:
        ValidationError: If path doesn't start with blog_id or is invalid.
    """
    if not storage_path:
        raise ValidationError('Storage path cannot be empty')

    path_parts = Path(storage_path).parts
    if len(path_parts) < 2:
        raise ValidationError('Storage path must contain a filename')

    try:
        path_blog_id = int(path_parts[0])
    except ValueError as error:
        raise ValidationError(
            'Storage path must start with blog ID',
        ) from error

    if path_blog_id != blog_id:
        raise ValidationError(
            f'Storage path blog ID ({path_blog_id}) does not match '
            f'owner ({blog_id})',
        )
