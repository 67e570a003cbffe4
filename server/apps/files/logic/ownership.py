"""Maintenance of each user's ``file_ids`` list.

The ``owner`` column on File is the source of truth. ``User.file_ids``
is the ordered view kept next to it, so every change to it happens with
the owner row locked, and :func:`reconcile_file_list` repairs any drift
left by an interrupted multi-step operation.
"""

import logging
from collections.abc import Iterable

from django.contrib.auth import get_user_model
from django.db import transaction

from server.apps.files.models import File

User = get_user_model()
logger = logging.getLogger(__name__)

# Field name constant to avoid string literal over-use
_FILE_IDS_FIELD = 'file_ids'


def append_file(owner_id: int, file_id: int) -> None:
    """Append a file id to its owner's list.

    Must run in the same transaction that created the File row.

    Args:
        owner_id: Owner's user ID.
        file_id: Newly created file ID.

    Raises:
        User.DoesNotExist: If the owner is gone.
    """
    with transaction.atomic():
        owner = User.objects.select_for_update().get(pk=owner_id)
        if file_id in owner.file_ids:
            return
        owner.file_ids = [*owner.file_ids, file_id]
        owner.save(update_fields=[_FILE_IDS_FIELD])


def remove_file(owner_id: int, file_id: int) -> bool:
    """Remove a file id from its owner's list.

    Idempotent: a missing owner or id is not an error.

    Args:
        owner_id: Owner's user ID.
        file_id: Deleted file ID.

    Returns:
        True if the list changed.
    """
    with transaction.atomic():
        owner = User.objects.select_for_update().filter(pk=owner_id).first()
        if owner is None or file_id not in owner.file_ids:
            return False
        owner.file_ids = [
            listed_id for listed_id in owner.file_ids if listed_id != file_id
        ]
        owner.save(update_fields=[_FILE_IDS_FIELD])
    return True


def clear_file_lists(owner_ids: Iterable[int] | None = None) -> int:
    """Empty the file lists of the given users, or of everyone.

    Args:
        owner_ids: Users whose lists to clear, None for all users.

    Returns:
        Number of user rows updated.
    """
    users = User.objects.all()
    if owner_ids is not None:
        users = users.filter(pk__in=list(owner_ids))
    return users.update(file_ids=[])


def reconcile_file_list(owner_id: int) -> bool:
    """Rebuild a user's list from the files they actually own.

    Keeps the order of ids that are still valid, drops stale and
    duplicate ids, and appends missing ones in upload order.

    Args:
        owner_id: User to reconcile.

    Returns:
        True if the list had drifted and was rewritten.
    """
    with transaction.atomic():
        owner = User.objects.select_for_update().filter(pk=owner_id).first()
        if owner is None:
            return False

        owned_ids = list(
            File.objects.filter(owner_id=owner_id)
            .order_by('uploaded_at', 'id')
            .values_list('id', flat=True),
        )
        owned = set(owned_ids)

        reconciled: list[int] = []
        for listed_id in owner.file_ids:
            if listed_id in owned and listed_id not in reconciled:
                reconciled.append(listed_id)
        listed = set(reconciled)
        reconciled.extend(
            file_id for file_id in owned_ids if file_id not in listed
        )

        if reconciled == owner.file_ids:
            return False

        logger.warning(
            'File list of user %s was out of sync: %s -> %s',
            owner.username,
            owner.file_ids,
            reconciled,
        )
        owner.file_ids = reconciled
        owner.save(update_fields=[_FILE_IDS_FIELD])
    return True
