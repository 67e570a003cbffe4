"""Database models for files app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

from server.apps.files.infrastructure.metadata import FILENAME_MAX_LENGTH

# Constants for field max lengths
_STORAGE_KEY_MAX_LENGTH: Final = 255
_CONTENT_TYPE_MAX_LENGTH: Final = 255
_CHECKSUM_MAX_LENGTH: Final = 64  # SHA256 hex length
_STATUS_MAX_LENGTH: Final = 16


class FileStatus(models.TextChoices):
    """Lifecycle status of a file."""

    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


@final
class File(models.Model):
    """Uploaded file owned by exactly one user.

    ``filename`` is unique across the whole system. Content lives in
    S3-compatible storage under ``content`` ({owner_id}/{random}{ext}),
    which does not depend on the filename, so renames never touch storage.

    The owner cannot be deleted while it still owns files: user deletion
    goes through the cascade coordinator, which removes files first.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='files',
        db_index=True,
    )

    filename = models.CharField(
        max_length=FILENAME_MAX_LENGTH,
        unique=True,
        help_text='Display name, unique across all users',
    )

    # upload_to='' means we control the full key
    content = models.FileField(
        upload_to='',
        max_length=_STORAGE_KEY_MAX_LENGTH,
        help_text='Storage key: {owner_id}/{random}{ext}',
    )

    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    content_type = models.CharField(
        max_length=_CONTENT_TYPE_MAX_LENGTH,
        help_text='MIME type reported at upload',
    )

    checksum_sha256 = models.CharField(
        max_length=_CHECKSUM_MAX_LENGTH,
        blank=True,
        default='',
        help_text='SHA256 hash for integrity verification',
    )

    status = models.CharField(
        max_length=_STATUS_MAX_LENGTH,
        choices=FileStatus.choices,
        default=FileStatus.ACTIVE,
    )

    name_counter = models.PositiveIntegerField(
        default=0,
        help_text='Last collision counter issued for this name',
    )

    download_count = models.PositiveIntegerField(default=0)

    # Timestamps
    uploaded_at = models.DateTimeField(auto_now_add=True)
    last_accessed_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['uploaded_at', 'id']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['owner', 'uploaded_at'],
                name='files_owner_uploaded_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.owner.username}:{self.filename}'

    def get_storage_path(self) -> str:
        """Get the key of the content in storage.

        Returns:
            Storage key.
        """
        return self.content.name
