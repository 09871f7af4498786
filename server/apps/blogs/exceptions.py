"""Exceptions for blogs app."""

from django.core.exceptions import ObjectDoesNotExist


class BlogNotFoundError(ObjectDoesNotExist):
    """Raised when a blog cannot be found by id or name."""

    def __init__(self, lookup: int | str) -> None:
        """Initialize BlogNotFoundError.

        Args:
            lookup: Blog id or blog name that was requested.
        """
        self.lookup = lookup
        if isinstance(lookup, int):
            message = f'Blog with id {lookup} is not found.'
        else:
            message = f'Blog with name {lookup} is not found.'
        super().__init__(message)
