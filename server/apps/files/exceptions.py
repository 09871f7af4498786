"""Exceptions for files app."""

from django.core.exceptions import ObjectDoesNotExist


class AttachmentNotFoundError(ObjectDoesNotExist):
    """Raised when an attachment id does not exist in the file store."""

    def __init__(self, attachment_id: int) -> None:
        """Initialize AttachmentNotFoundError.

        Args:
            attachment_id: Id that was looked up.
        """
        self.attachment_id = attachment_id
        super().__init__(f'Attachment with id {attachment_id} is not found.')
