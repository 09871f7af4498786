"""Database models for blogs app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_BLOG_NAME_MAX_LENGTH: Final = 64
_PREFERRED_BLOG_NAME_MAX_LENGTH: Final = 128


@final
class Blog(models.Model):
    """Blog owned by a user.

    Posts and attachments belong to a blog, not directly to a user.
    A user may own several blogs and acts as one of them at a time
    (see ``ActiveBlog``).
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='blogs',
        db_index=True,
    )

    blog_name = models.CharField(
        max_length=_BLOG_NAME_MAX_LENGTH,
        unique=True,
        help_text='Unique handle of the blog',
    )

    preferred_blog_name = models.CharField(
        max_length=_PREFERRED_BLOG_NAME_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Display name chosen by the owner',
    )

    is_private = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Blog'  # type: ignore[mutable-override]
        verbose_name_plural = 'Blogs'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['blog_name']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.blog_name


@final
class ActiveBlog(models.Model):
    """Blog a user is currently acting as.

    Ownership checks compare a post's blog against this record.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='active_blog',
        primary_key=True,
    )

    blog = models.ForeignKey(
        Blog,
        on_delete=models.CASCADE,
        related_name='+',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'Active Blog'  # type: ignore[mutable-override]
        verbose_name_plural = 'Active Blogs'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username} -> {self.blog.blog_name}'


@final
class Follow(models.Model):
    """Follow relationship between two blogs."""

    follower = models.ForeignKey(
        Blog,
        on_delete=models.CASCADE,
        related_name='following',
    )

    followee = models.ForeignKey(
        Blog,
        on_delete=models.CASCADE,
        related_name='followers',
    )

    notifications_enabled = models.BooleanField(default=True)
    muted = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Follow'  # type: ignore[mutable-override]
        verbose_name_plural = 'Follows'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.UniqueConstraint(
                fields=['follower', 'followee'],
                name='follows_follower_followee_unique',
            ),
            models.CheckConstraint(
                condition=~models.Q(follower=models.F('followee')),
                name='follows_no_self_follow',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.follower.blog_name} -> {self.followee.blog_name}'
