"""Shared fixtures for app tests."""

from typing import Final

import boto3
import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

from server.apps.blogs.models import Blog

User = get_user_model()

TEST_BUCKET: Final = 'microblog'


@pytest.fixture(autouse=True)
def _clear_cache():
    """Start every test with an empty cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    """Create test user (the signup signal gives it a default blog).

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for ownership tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def blog(user):
    """Default blog of ``user``."""
    return Blog.objects.get(user=user)


@pytest.fixture
def other_blog(other_user):
    """Default blog of ``other_user``."""
    return Blog.objects.get(user=other_user)


@pytest.fixture
def mock_s3():
    """Mock S3 service with the attachments bucket.

    Yields:
        boto3 S3 resource with the bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket=TEST_BUCKET)
        yield conn


@pytest.fixture
def make_upload():
    """Factory for uploaded files.

    Returns:
        Callable building a SimpleUploadedFile.
    """
    def factory(
        name: str = 'photo.png',
        content: bytes = b'fake image bytes',
        content_type: str = 'image/png',
    ) -> SimpleUploadedFile:
        return SimpleUploadedFile(name, content, content_type=content_type)
    return factory
