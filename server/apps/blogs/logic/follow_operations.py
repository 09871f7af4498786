"""Business logic for follow relationships between blogs."""

import logging

from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from server.apps.blogs.models import Blog, Follow

logger = logging.getLogger(__name__)


def follow_blog(
    follower: Blog,
    followee: Blog,
    *,
    notifications_enabled: bool = True,
) -> Follow:
    """Make ``follower`` follow ``followee``.

    Following an already followed blog returns the existing record.

    Args:
        follower: Blog that follows.
        followee: Blog being followed.
        notifications_enabled: Whether the follower gets notifications.

    Returns:
        Follow instance.

    Raises:
        ValidationError: If a blog tries to follow itself.
    """
    if follower.pk == followee.pk:
        raise ValidationError('A blog cannot follow itself.')

    follow, created = Follow.objects.get_or_create(
        follower=follower,
        followee=followee,
        defaults={'notifications_enabled': notifications_enabled},
    )
    if created:
        logger.info(
            'Blog %s now follows %s',
            follower.blog_name,
            followee.blog_name,
        )
    return follow


def unfollow_blog(follower: Blog, followee: Blog) -> bool:
    """Remove a follow relationship.

    Returns:
        True if a relationship was removed, False if none existed.
    """
    deleted, _ = Follow.objects.filter(
        follower=follower,
        followee=followee,
    ).delete()
    if deleted:
        logger.info(
            'Blog %s unfollowed %s',
            follower.blog_name,
            followee.blog_name,
        )
    return bool(deleted)


def get_followees(blog: Blog) -> QuerySet[Follow]:
    """List blogs followed by ``blog``, newest first."""
    return Follow.objects.filter(follower=blog).select_related(
        'follower',
        'followee',
    )
