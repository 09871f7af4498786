"""Tests for the S3 storage backend."""

from unittest.mock import patch

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from storages.backends.s3 import S3Storage

from server.apps.files.infrastructure.storage import FileStorage

_STORAGE_MODULE = 'server.apps.files.infrastructure.storage'


def test_default_storage_is_file_storage():
    """Test settings wire the custom backend as default storage."""
    assert isinstance(default_storage, FileStorage)


def test_save_and_delete(mock_s3):
    """Test objects can be written and removed."""
    saved_name = default_storage.save('1/note.txt', ContentFile(b'hello'))

    assert default_storage.exists(saved_name)

    default_storage.delete(saved_name)

    assert not default_storage.exists(saved_name)


def test_rollback_upload_removes_object(mock_s3):
    """Test rollback deletes an uploaded object."""
    saved_name = default_storage.save('1/note.txt', ContentFile(b'hello'))

    default_storage.rollback_upload(saved_name)

    assert not default_storage.exists(saved_name)


def test_rollback_upload_swallows_errors(mock_s3, monkeypatch):
    """Test rollback never raises."""
    def failing_delete(name):
        raise RuntimeError('s3 down')

    monkeypatch.setattr(default_storage, 'delete', failing_delete)

    default_storage.rollback_upload('1/missing.txt')


def test_save_failure_is_logged_and_raised(mock_s3):
    """Test upload failures are logged and re-raised."""
    with (
        patch.object(S3Storage, '_save', side_effect=OSError('S3 down')),
        patch(f'{_STORAGE_MODULE}.logger') as mock_logger,
        pytest.raises(OSError, match='S3 down'),
    ):
        default_storage.save('1/note.txt', ContentFile(b'hello'))

    mock_logger.exception.assert_called_once_with(
        'Attachment %s failed: %s',
        'upload',
        '1/note.txt',
    )


def test_delete_failure_is_logged_and_raised(mock_s3):
    """Test delete failures surface to the caller."""
    with (
        patch.object(S3Storage, 'delete', side_effect=OSError('S3 down')),
        patch(f'{_STORAGE_MODULE}.logger') as mock_logger,
        pytest.raises(OSError, match='S3 down'),
    ):
        default_storage.delete('1/note.txt')

    mock_logger.exception.assert_called_once_with(
        'Attachment %s failed: %s',
        'delete',
        '1/note.txt',
    )
