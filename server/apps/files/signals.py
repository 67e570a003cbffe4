"""Signal handlers for files app."""

import logging

from django.db.models.signals import post_delete
from django.dispatch import receiver

from server.apps.files.infrastructure.storage import get_file_storage
from server.apps.files.models import File

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=File)
def delete_content_from_storage(
    sender: type[File],
    instance: File,
    **kwargs: object,
) -> None:
    """Delete stored content when a File record is deleted.

    Runs for every deletion path (registry, cascade, admin, bulk
    querysets), so content never outlives its record. Failures are
    logged by the storage backend and do not undo the database delete.

    Args:
        sender: The File model class.
        instance: The File instance being deleted.
        **kwargs: Additional signal arguments.
    """
    if not instance.content:
        return

    logger.debug(
        'Removing content of deleted file %s: %s',
        instance.filename,
        instance.content.name,
    )
    get_file_storage().discard(instance.content.name)
