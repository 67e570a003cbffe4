"""Custom storage backend for S3-compatible storage."""

import logging
from typing import Any, final, override

from django.core.files import File
from django.core.files.storage import default_storage
from storages.backends.s3 import S3Storage

from server.apps.files.exceptions import StorageError

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """S3 storage backend for uploaded file content.

    Extends django-storages S3Storage with:
    - Rollback support for failed DB operations after an upload
    - Logging around every write and delete
    """

    @override
    def save(
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used (may differ from name if conflicts).

        Raises:
            StorageError: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception as error:
            logger.exception('Failed to upload file to storage: %s', name)
            raise StorageError(name, 'upload') from error
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            StorageError: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception as error:
            logger.exception('Failed to delete file from storage: %s', name)
            raise StorageError(name, 'delete') from error

    def open_for_read(self, name: str) -> File:
        """Open stored content as a readable binary stream.

        Args:
            name: Storage path of the file.

        Returns:
            Lazily downloading file object, the caller closes it.

        Raises:
            StorageError: If the object cannot be opened.
        """
        try:
            return self.open(name, 'rb')
        except Exception as error:
            logger.exception('Failed to open file from storage: %s', name)
            raise StorageError(name, 'open') from error

    def discard(self, name: str) -> bool:
        """Delete content whose database record is already gone.

        Best-effort: a missing object is only a warning and a failing
        delete is logged, because the database delete already succeeded.

        Args:
            name: Storage path of the file.

        Returns:
            True if an object was deleted.
        """
        try:
            if not self.exists(name):
                logger.warning(
                    'File not found in storage (already deleted?): %s',
                    name,
                )
                return False
            self.delete(name)
        except Exception:
            logger.exception(
                'Failed to delete file from storage (orphaned): %s',
                name,
            )
            return False
        return True

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded content after a failed database write.

        Best-effort: if deletion fails the error is logged, not raised,
        and the object is left for manual cleanup.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )


def get_file_storage() -> FileStorage:
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]
