"""S3 storage backend for post attachments."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, final, override

from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)


@contextmanager
def _logged_failure(action: str, name: str) -> Iterator[None]:
    try:
        yield
    except Exception:
        logger.exception('Attachment %s failed: %s', action, name)
        raise


@final
class FileStorage(S3Storage):
    """Attachment bucket: objects keyed ``{blog_id}/{filename}``.

    Upload and delete failures are logged and re-raised. Deleting the
    objects of removed attachments is driven by the ``post_delete``
    handler in ``server.apps.files.signals``.
    """

    @override
    def _save(self, name: str, content: Any) -> str:
        with _logged_failure('upload', name):
            saved_name = super()._save(name, content)
        logger.info('Uploaded attachment object: %s', saved_name)
        return saved_name

    @override
    def delete(self, name: str) -> None:
        """Remove an attachment object."""
        with _logged_failure('delete', name):
            super().delete(name)
        logger.info('Deleted attachment object: %s', name)

    def rollback_upload(self, name: str) -> None:
        """Remove an object whose attachment row was never written.

        Never raises: the row write already failed and that error is
        the one the caller propagates.

        Args:
            name: Storage path returned by ``save``.
        """
        logger.warning('Rolling back attachment upload: %s', name)
        try:
            self.delete(name)
        except Exception:
            logger.exception('Orphaned attachment object left: %s', name)
