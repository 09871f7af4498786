"""Fixtures for files app tests."""

import pytest
from django.core.files.base import ContentFile

from server.apps.files.models import Attachment


@pytest.fixture
def sample_file_content():
    """Sample file content for testing.

    Returns:
        ContentFile with test data.
    """
    return ContentFile(b'test file content', name='test.txt')


@pytest.fixture
def attachment_record(blog):
    """Attachment row without stored bytes.

    Returns:
        Attachment instance.
    """
    return Attachment.objects.create(
        blog=blog,
        file=f'{blog.id}/test.txt',
        original_name='test.txt',
        size_bytes=100,
        mime_type='text/plain',
        checksum_sha256='abcd' * 16,
    )
