"""Business logic for blog operations."""

import logging
from typing import Any

from django.db import transaction

from server.apps.blogs.exceptions import BlogNotFoundError
from server.apps.blogs.models import ActiveBlog, Blog
from server.apps.blogs.schemas import BlogResponse, to_blog_response

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def save_blog(blog: Blog) -> Blog:
    """Persist a blog.

    Args:
        blog: Blog instance, new or existing.

    Returns:
        The saved blog.
    """
    blog.save()
    logger.debug('Blog saved: %s (ID: %d)', blog.blog_name, blog.id)
    return blog


def create_default_blog_for_user(user: _User) -> Blog:
    """Create the default blog for a newly registered user.

    The blog is named after the username, is public, and becomes
    the user's active blog. Usernames longer than a blog name are
    truncated; a taken name gets a numeric suffix.

    Args:
        user: Newly registered user.

    Returns:
        Created Blog instance.
    """
    with transaction.atomic():
        blog = save_blog(Blog(
            user=user,
            blog_name=_free_blog_name(user.username),
            preferred_blog_name=user.username[:_max_length('preferred_blog_name')],
            is_private=False,
        ))
        set_active_blog(user, blog)

    logger.info(
        'Created default blog for user %s (blog ID: %d)',
        user.username,
        blog.id,
    )
    return blog


def set_active_blog(user: _User, blog: Blog) -> None:
    """Make ``blog`` the blog the user acts as.

    Args:
        user: Owner of the blog.
        blog: Blog to activate.
    """
    ActiveBlog.objects.update_or_create(user=user, defaults={'blog': blog})


def get_active_blog(user: _User) -> Blog | None:
    """Get the blog a user currently acts as.

    Args:
        user: Authenticated user.

    Returns:
        Active Blog, or None if the user has none.
    """
    active = (
        ActiveBlog.objects.select_related('blog')
        .filter(user_id=user.pk)
        .first()
    )
    return active.blog if active is not None else None


def get_blog(blog_id: int) -> Blog:
    """Get blog by id.

    Args:
        blog_id: Blog primary key.

    Returns:
        Blog instance.

    Raises:
        BlogNotFoundError: If blog doesn't exist.
    """
    try:
        return Blog.objects.get(id=blog_id)
    except Blog.DoesNotExist as error:
        raise BlogNotFoundError(blog_id) from error


def get_blog_by_name(blog_name: str) -> Blog:
    """Get blog by its unique name.

    Args:
        blog_name: Blog handle.

    Returns:
        Blog instance.

    Raises:
        BlogNotFoundError: If blog doesn't exist.
    """
    try:
        return Blog.objects.get(blog_name=blog_name)
    except Blog.DoesNotExist as error:
        raise BlogNotFoundError(blog_name) from error


def get_blog_response(blog_id: int) -> BlogResponse:
    """Get blog response DTO by id.

    Raises:
        BlogNotFoundError: If blog doesn't exist.
    """
    return to_blog_response(get_blog(blog_id))


def _free_blog_name(username: str) -> str:
    max_length = _max_length('blog_name')
    blog_name = username[:max_length]
    suffix_number = 1
    while Blog.objects.filter(blog_name=blog_name).exists():
        suffix_number += 1
        suffix = f'-{suffix_number}'
        blog_name = f'{username[:max_length - len(suffix)]}{suffix}'
    return blog_name


def _max_length(field_name: str) -> int:
    return Blog._meta.get_field(field_name).max_length  # noqa: WPS437
