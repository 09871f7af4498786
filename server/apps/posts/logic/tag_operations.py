"""Business logic for the post tag registry."""

import logging
from collections.abc import Iterable

from django.db.models import QuerySet

from server.apps.posts.models import PostTag

logger = logging.getLogger(__name__)


def find_or_create_by_name(name: str) -> PostTag:
    """Get the tag with ``name``, creating it on first use.

    Args:
        name: Tag name; surrounding whitespace is ignored.

    Returns:
        PostTag instance.
    """
    post_tag, created = PostTag.objects.get_or_create(name=name.strip())
    if created:
        logger.info('Created tag: %s (ID: %d)', post_tag.name, post_tag.id)
    return post_tag


def find_or_create_all(names: Iterable[str]) -> list[PostTag]:
    """Resolve tag names, each distinct name once, in first-seen order."""
    unique_names = dict.fromkeys(
        name.strip() for name in names if name.strip()
    )
    return [find_or_create_by_name(name) for name in unique_names]


def get_tags(names: Iterable[str]) -> QuerySet[PostTag]:
    """Existing tags among ``names``; unknown names are ignored."""
    return PostTag.objects.filter(name__in=[name.strip() for name in names])
