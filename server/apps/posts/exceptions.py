"""Exceptions for posts app."""

from django.core.exceptions import (
    ObjectDoesNotExist,
    PermissionDenied,
    ValidationError,
)


class PostNotFoundError(ObjectDoesNotExist):
    """Raised when a post id does not exist."""

    def __init__(self, post_id: int | None) -> None:
        """Initialize PostNotFoundError.

        Args:
            post_id: Id that was looked up.
        """
        self.post_id = post_id
        super().__init__(f'Post with id {post_id} is not found.')


class PostAccessDeniedError(PermissionDenied):
    """Raised when the principal may not modify a post."""


class InvalidAttachmentOrderError(ValidationError):
    """Raised when a requested attachment ordering cannot be applied."""
