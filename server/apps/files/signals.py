"""Signal handlers for files app."""

import logging
from functools import partial

from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models.signals import post_delete
from django.dispatch import receiver

from server.apps.files.models import Attachment

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=Attachment)
def delete_file_from_storage(
    sender: type[Attachment],
    instance: Attachment,
    **kwargs: object,
) -> None:
    """Schedule removal of stored bytes once the row deletion commits.

    Runs for deletes coming from the file store logic, the admin and
    cascades from a deleted blog alike. A rolled back deletion keeps
    its object in storage.

    Args:
        sender: The Attachment model class.
        instance: The Attachment instance being deleted.
        **kwargs: Additional signal arguments.
    """
    if not instance.file:
        return

    transaction.on_commit(
        partial(remove_stored_object, instance.file.name),
        using=kwargs.get('using'),
    )


def remove_stored_object(storage_name: str) -> None:
    """Delete an attachment object whose row is gone.

    Args:
        storage_name: Storage path of the object.
    """
    logger.info(
        'Deleting attachment from storage after DB delete: %s',
        storage_name,
    )
    try:
        if default_storage.exists(storage_name):
            default_storage.delete(storage_name)
        else:
            logger.warning(
                'Attachment not found in storage (already deleted?): %s',
                storage_name,
            )
    except Exception:
        # Row is gone for good, the object stays orphaned
        logger.exception(
            'Failed to delete attachment from storage (orphaned): %s',
            storage_name,
        )
