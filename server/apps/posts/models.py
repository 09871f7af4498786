"""Database models for posts app."""

from collections.abc import Sequence
from typing import ClassVar, Final, final, override

from django.db import models

from server.apps.blogs.models import Blog
from server.apps.files.models import Attachment

# Constants for field max lengths
_TITLE_MAX_LENGTH: Final = 255
_TAG_NAME_MAX_LENGTH: Final = 100
_CATEGORY_MAX_LENGTH: Final = 16


class PostCategory(models.TextChoices):
    """Position of a post in a thread."""

    ROOT = 'ROOT', 'Root'
    REPLY = 'REPLY', 'Reply'


@final
class PostTag(models.Model):
    """Tag shared by all blogs; names are unique and case-sensitive."""

    name = models.CharField(
        max_length=_TAG_NAME_MAX_LENGTH,
        unique=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Post Tag'  # type: ignore[mutable-override]
        verbose_name_plural = 'Post Tags'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['name']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.name


@final
class Post(models.Model):
    """Post published by a blog.

    A post is either a thread root or a reply to another post.
    Attachments keep a dense 0..n-1 order through ``PostAttachment``.
    """

    blog = models.ForeignKey(
        Blog,
        on_delete=models.CASCADE,
        related_name='posts',
        db_index=True,
    )

    title = models.CharField(
        max_length=_TITLE_MAX_LENGTH,
        blank=True,
        default='',
    )

    content = models.TextField(blank=True, default='')

    is_sensitive = models.BooleanField(default=False)
    published = models.BooleanField(default=False)

    category = models.CharField(
        max_length=_CATEGORY_MAX_LENGTH,
        choices=PostCategory.choices,
        default=PostCategory.ROOT,
        db_index=True,
    )

    # Replies survive their parent
    parent = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='replies',
    )

    post_tags = models.ManyToManyField(
        PostTag,
        related_name='posts',
        blank=True,
    )

    attachments = models.ManyToManyField(
        Attachment,
        through='PostAttachment',
        related_name='posts',
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Post'  # type: ignore[mutable-override]
        verbose_name_plural = 'Posts'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at', '-id']

        permissions: ClassVar[list[tuple[str, str]]] = [
            ('manage_post', 'Can manage posts of any blog'),
        ]

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['blog', 'category', '-created_at'],
                name='posts_blog_category_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.blog.blog_name}:{self.title or self.pk}'

    def add_reply(self, reply: 'Post') -> None:
        """Link ``reply`` under this post; the caller saves it."""
        reply.parent = self
        reply.category = PostCategory.REPLY

    def add_post_tag(self, post_tag: PostTag) -> None:
        """Associate a tag; requires the post to be saved."""
        self.post_tags.add(post_tag)

    def get_attachments(self) -> list[Attachment]:
        """Attachments in display order."""
        return [
            link.attachment
            for link in self.post_attachments.all()
        ]

    def set_attachments(self, attachments: Sequence[Attachment]) -> None:
        """Replace the attachment list, renumbering positions from 0.

        Args:
            attachments: Attachments in the new display order.
        """
        self.post_attachments.all().delete()
        PostAttachment.objects.bulk_create([
            PostAttachment(post=self, attachment=attachment, position=index)
            for index, attachment in enumerate(attachments)
        ])


@final
class PostAttachment(models.Model):
    """Position of an attachment inside a post."""

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name='post_attachments',
    )

    attachment = models.ForeignKey(
        Attachment,
        on_delete=models.CASCADE,
        related_name='post_links',
    )

    position = models.PositiveIntegerField()

    class Meta:
        """Model metadata."""

        verbose_name = 'Post Attachment'  # type: ignore[mutable-override]
        verbose_name_plural = 'Post Attachments'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['position']

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.UniqueConstraint(
                fields=['post', 'attachment'],
                name='post_attachments_unique',
            ),
            models.UniqueConstraint(
                fields=['post', 'position'],
                name='post_attachments_position_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.post_id}#{self.position}: {self.attachment_id}'
