"""Cascade coordinator: deletions that must keep ownership consistent.

- Deleting a user deletes their files, then their sessions, then the
  user row. Files are protected by the database, so the user row cannot
  go first.
- Deleting a file removes its id from the owner's list in the same
  transaction.
- Bulk file deletion clears the lists of every affected owner.

Every step is idempotent: deleting something already gone is a no-op.
Stored content is removed by the ``post_delete`` signal.
"""

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet

from server.apps.accounts.logic.session_store import end_user_sessions
from server.apps.files.logic.ownership import clear_file_lists, remove_file
from server.apps.files.models import File

User = get_user_model()
logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CascadeResult:
    """What a user deletion removed."""

    user_deleted: bool
    files_deleted: int = 0
    sessions_deleted: int = 0


def delete_file_cascade(file_instance: File) -> None:
    """Delete one file and drop it from its owner's list.

    Args:
        file_instance: File to delete.

    Raises:
        Exception: If the DB deletion fails (nothing is committed).
    """
    file_id = file_instance.id
    owner_id = file_instance.owner_id

    try:
        with transaction.atomic():
            file_instance.delete()
            remove_file(owner_id, file_id)
    except Exception:
        logger.exception('Failed to delete file: ID=%d', file_id)
        raise

    logger.info('File deleted: ID=%d (owner ID=%d)', file_id, owner_id)


def delete_files_cascade(
    files: QuerySet[File],
    clear_all_lists: bool = False,
    owner_id: int | None = None,
) -> int:
    """Delete a set of files and clear their owners' lists.

    Args:
        files: Files to delete.
        clear_all_lists: Clear every user's list instead of only the
            owners found in ``files`` (used when deleting everything).
        owner_id: Owner whose list is cleared even when ``files`` is
            already empty.

    Returns:
        Number of files deleted.
    """
    owner_ids = set(files.values_list('owner_id', flat=True))
    if owner_id is not None:
        owner_ids.add(owner_id)

    try:
        with transaction.atomic():
            deleted, _ = files.delete()
            clear_file_lists(None if clear_all_lists else owner_ids)
    except Exception:
        logger.exception('Bulk file deletion failed for owners %s', owner_ids)
        raise

    logger.info('Deleted %d files of %d owners', deleted, len(owner_ids))
    return deleted


def delete_user_cascade(user_id: int) -> CascadeResult:
    """Delete a user together with their files and sessions.

    Args:
        user_id: User to delete.

    Returns:
        Counts of what was removed; ``user_deleted`` is False when the
        user was already gone.
    """
    try:
        with transaction.atomic():
            user = User.objects.select_for_update().filter(pk=user_id).first()
            if user is None:
                logger.info('User ID=%d already deleted', user_id)
                return CascadeResult(user_deleted=False)

            files_deleted, _ = File.objects.filter(owner_id=user_id).delete()
            sessions_deleted = end_user_sessions(user_id)
            user.delete()
    except Exception:
        logger.exception('Failed to delete user: ID=%d', user_id)
        raise

    logger.info(
        'User deleted: ID=%d with %d files and %d sessions',
        user_id,
        files_deleted,
        sessions_deleted,
    )
    return CascadeResult(
        user_deleted=True,
        files_deleted=files_deleted,
        sessions_deleted=sessions_deleted,
    )
