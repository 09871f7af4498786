"""Signal handlers for blogs app."""

import logging
from typing import Any

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from server.apps.blogs.logic.blog_operations import create_default_blog_for_user

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_blog_for_new_user(
    sender: type[Any],
    instance: Any,
    created: bool,
    raw: bool = False,
    **kwargs: object,
) -> None:
    """Create the default blog when a user registers.

    Args:
        sender: The user model class.
        instance: The saved user.
        created: True if the user was just created.
        raw: True when loading fixtures; no blog is created then.
        **kwargs: Additional signal arguments.
    """
    if not created or raw:
        return

    logger.info('Creating default blog for new user: %s', instance.username)
    create_default_blog_for_user(instance)
