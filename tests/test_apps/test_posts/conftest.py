"""Fixtures for posts app tests."""

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission

from server.apps.posts.logic.post_operations import create_new_post
from server.apps.posts.schemas import PostRequest

User = get_user_model()


@pytest.fixture
def manager_user(db):
    """User holding the manage-any-post permission.

    Returns:
        Freshly loaded user (permission cache empty).
    """
    manager = User.objects.create_user(
        username='moderator',
        password='testpass123',
        email='moderator@example.com',
    )
    manager.user_permissions.add(
        Permission.objects.get(
            codename='manage_post',
            content_type__app_label='posts',
        ),
    )
    return User.objects.get(pk=manager.pk)


@pytest.fixture
def make_post():
    """Factory creating posts through the service.

    Returns:
        Callable returning the created PostResponse.
    """
    def factory(blog, files=(), **fields):
        fields.setdefault('title', 'Hello')
        return create_new_post(PostRequest(**fields), list(files), blog)
    return factory
