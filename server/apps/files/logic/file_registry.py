"""File registry: every operation on uploaded files.

Each operation takes the caller's session first and asks the authorizer
for the matching requirement before touching any row. Deletions go
through the cascade coordinator so owners' file lists stay in step.
"""

import logging
from typing import Any, BinaryIO, NamedTuple

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from server.apps.accounts.logic.authorizer import (
    MustBeAdmin,
    MustBeAuthenticated,
    MustOwn,
    require,
)
from server.apps.accounts.models import Session
from server.apps.files.exceptions import (
    FileTooLargeError,
    NameConflictError,
    UnsupportedContentTypeError,
)
from server.apps.files.infrastructure.metadata import (
    calculate_checksum,
    detect_mime_type,
    generate_storage_key,
    get_file_size,
    normalize_filename,
)
from server.apps.files.infrastructure.storage import get_file_storage
from server.apps.files.logic import upload_namer
from server.apps.files.logic.cascade import (
    delete_file_cascade,
    delete_files_cascade,
)
from server.apps.files.logic.ownership import append_file, reconcile_file_list
from server.apps.files.models import File, FileStatus

User = get_user_model()
logger = logging.getLogger(__name__)

_DEFAULT_CONTENT_TYPES = frozenset(('image/jpeg', 'image/png', 'application/pdf'))


class Download(NamedTuple):
    """Everything the transport needs to stream a file back."""

    stream: Any
    content_type: str
    filename: str
    size_bytes: int


def get_allowed_content_types() -> frozenset[str]:
    """Get content types accepted for upload.

    Returns:
        Allowed types from settings or JPEG, PNG and PDF.
    """
    return frozenset(
        getattr(settings, 'FILES_ALLOWED_CONTENT_TYPES', _DEFAULT_CONTENT_TYPES),
    )


def get_max_upload_size() -> int:
    """Get the upload size ceiling.

    Returns:
        Limit in bytes from settings or default of 512 KB.
    """
    return getattr(settings, 'FILES_MAX_UPLOAD_SIZE', 512 * 1024)


def get_name_retry_limit() -> int:
    """Get how often an upload re-probes after a name race.

    Returns:
        Attempt count from settings or default of 3.
    """
    return getattr(settings, 'FILES_NAME_RETRY_LIMIT', 3)


def validate_upload(content_type: str, size_bytes: int) -> None:
    """Check content type and size against the configured limits.

    Args:
        content_type: MIME type of the upload.
        size_bytes: Size of the upload.

    Raises:
        UnsupportedContentTypeError: If the type is not allowed.
        FileTooLargeError: If the upload is over the ceiling.
    """
    allowed = get_allowed_content_types()
    if content_type not in allowed:
        raise UnsupportedContentTypeError(content_type, allowed)

    max_bytes = get_max_upload_size()
    if size_bytes > max_bytes:
        raise FileTooLargeError(size_bytes, max_bytes)


def upload(
    session: Session | None,
    candidate_name: str,
    file_obj: BinaryIO | Any,
    content_type: str | None = None,
    size_bytes: int | None = None,
) -> File:
    """Store an upload and register it under a collision-free name.

    Transaction safety: content goes to storage first, then the File row
    and the owner's list entry are written in one transaction. If the
    database part fails the stored content is deleted again.

    Args:
        session: Caller's session.
        candidate_name: Filename requested by the client.
        file_obj: File-like object with the content.
        content_type: MIME type reported by the client, guessed from the
            name when missing.
        size_bytes: Size reported by the client, measured when missing.

    Returns:
        Created File instance.

    Raises:
        NotAuthenticatedError: If there is no valid session.
        ValidationError: For an empty name, bad type or oversized upload.
        NameConflictError: If every attempt lost a name race.
    """
    owner = require(session, MustBeAuthenticated())

    filename = normalize_filename(candidate_name)
    content_type = content_type or detect_mime_type(filename)
    if size_bytes is None:
        size_bytes = get_file_size(file_obj)
    validate_upload(content_type, size_bytes)

    checksum = calculate_checksum(file_obj)
    storage_key = generate_storage_key(owner.id, filename)

    storage = get_file_storage()

    # Step 1: Upload to storage first
    saved_name = storage.save(storage_key, file_obj)

    # Step 2: Create the record under a free name
    try:
        file_instance = _create_record(
            owner,
            filename,
            saved_name,
            size_bytes,
            content_type,
            checksum,
        )
    except Exception:
        logger.exception(
            'Database write failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise

    return file_instance


def _create_record(  # noqa: WPS211
    owner: Any,
    filename: str,
    storage_name: str,
    size_bytes: int,
    content_type: str,
    checksum: str,
) -> File:
    """Create the File row and list entry, re-probing after name races.

    Args:
        owner: Uploading user.
        filename: Normalized candidate name.
        storage_name: Key the content was saved under.
        size_bytes: Content size.
        content_type: Content MIME type.
        checksum: SHA256 of the content.

    Returns:
        Created File instance.

    Raises:
        NameConflictError: If the retry limit is reached.
    """
    retry_limit = get_name_retry_limit()

    for attempt in range(1, retry_limit + 1):
        resolved = upload_namer.resolve(filename)
        try:
            with transaction.atomic():
                file_instance = File.objects.create(
                    owner=owner,
                    filename=resolved.name,
                    content=storage_name,
                    size_bytes=size_bytes,
                    content_type=content_type,
                    checksum_sha256=checksum,
                    status=FileStatus.ACTIVE,
                )
                append_file(owner.id, file_instance.id)
                upload_namer.remember_counter(filename, resolved.counter)
        except IntegrityError:
            logger.warning(
                'Filename %s was taken concurrently (attempt %d of %d)',
                resolved.name,
                attempt,
                retry_limit,
            )
            continue

        logger.info(
            'File uploaded: %s (ID: %d, owner: %s)',
            file_instance.filename,
            file_instance.id,
            owner.username,
        )
        return file_instance

    raise NameConflictError(filename)


def _get_authorized_file(
    session: Session | None,
    file_id: int,
) -> tuple[Any, File]:
    """Load a file and check the caller may act on it.

    Args:
        session: Caller's session.
        file_id: File to load.

    Returns:
        Tuple of (caller, file).

    Raises:
        NotAuthenticatedError: If there is no valid session.
        File.DoesNotExist: If the file does not exist.
        NotAuthorizedError: If the caller neither owns it nor is admin.
    """
    require(session, MustBeAuthenticated())
    file_instance = File.objects.select_related('owner').get(pk=file_id)
    user = require(session, MustOwn(file_instance.owner_id))
    return user, file_instance


def _touch(files: list[File]) -> None:
    """Record that files were accessed now.

    Args:
        files: Files returned to the caller.
    """
    if not files:
        return
    now = timezone.now()
    File.objects.filter(pk__in=[file_instance.pk for file_instance in files]).update(
        last_accessed_at=now,
    )
    for file_instance in files:
        file_instance.last_accessed_at = now


def get(session: Session | None, file_id: int) -> File:
    """Fetch a file the caller owns (or any file for admins).

    Args:
        session: Caller's session.
        file_id: File to fetch.

    Returns:
        File instance.
    """
    _, file_instance = _get_authorized_file(session, file_id)
    return file_instance


def list_owned(session: Session | None) -> list[File]:
    """List the caller's own files.

    The owner column decides what is listed; the caller's ``file_ids``
    list is reconciled on the way.

    Args:
        session: Caller's session.

    Returns:
        Files in upload order.
    """
    user = require(session, MustBeAuthenticated())
    reconcile_file_list(user.id)
    return list(File.objects.filter(owner_id=user.id))


def list_owned_by(session: Session | None, user_id: int) -> list[File]:
    """List another user's files (admin only).

    Args:
        session: Caller's session.
        user_id: Owner whose files to list.

    Returns:
        Files in upload order.

    Raises:
        User.DoesNotExist: If no user has that id.
    """
    require(session, MustBeAdmin())
    owner = User.objects.get(pk=user_id)
    files = list(File.objects.filter(owner_id=owner.pk))
    _touch(files)
    return files


def list_all(session: Session | None) -> list[File]:
    """List every file in the system (admin only).

    Args:
        session: Caller's session.

    Returns:
        Files in upload order.
    """
    require(session, MustBeAdmin())
    files = list(File.objects.all())
    _touch(files)
    return files


def rename(session: Session | None, file_id: int, new_name: str) -> File:
    """Rename a file.

    Filenames are unique across all users, so any existing file with
    the new name is a conflict, whoever owns it.

    Args:
        session: Caller's session.
        file_id: File to rename.
        new_name: Requested filename.

    Returns:
        Updated File instance.

    Raises:
        ValidationError: If the new name is empty.
        NameConflictError: If the new name is taken.
    """
    user, file_instance = _get_authorized_file(session, file_id)
    new_name = normalize_filename(new_name)

    if new_name == file_instance.filename:
        return file_instance

    if File.objects.filter(filename=new_name).exists():
        raise NameConflictError(new_name)

    old_name = file_instance.filename
    file_instance.filename = new_name
    try:
        with transaction.atomic():
            file_instance.save(update_fields=['filename', 'modified_at'])
    except IntegrityError as error:
        file_instance.filename = old_name
        raise NameConflictError(new_name) from error

    logger.info(
        'File renamed by %s: %s -> %s (ID: %d)',
        user.username,
        old_name,
        new_name,
        file_instance.id,
    )
    return file_instance


def delete(session: Session | None, file_id: int) -> None:
    """Delete a file and drop it from its owner's list.

    Args:
        session: Caller's session.
        file_id: File to delete.
    """
    user, file_instance = _get_authorized_file(session, file_id)
    logger.info(
        'User %s is deleting file %s (ID: %d)',
        user.username,
        file_instance.filename,
        file_id,
    )
    delete_file_cascade(file_instance)


def delete_mine(session: Session | None) -> int:
    """Delete all of the caller's files.

    Args:
        session: Caller's session.

    Returns:
        Number of files deleted.
    """
    user = require(session, MustBeAuthenticated())
    return delete_files_cascade(
        File.objects.filter(owner_id=user.id),
        owner_id=user.id,
    )


def delete_all(session: Session | None) -> int:
    """Delete every file of every user (admin only).

    Args:
        session: Caller's session.

    Returns:
        Number of files deleted.
    """
    admin = require(session, MustBeAdmin())
    logger.info('Admin %s is deleting all files', admin.username)
    return delete_files_cascade(File.objects.all(), clear_all_lists=True)


def delete_all_owned_by(session: Session | None, user_id: int) -> int:
    """Delete all files of one user (admin only).

    Args:
        session: Caller's session.
        user_id: Owner whose files to delete.

    Returns:
        Number of files deleted.

    Raises:
        User.DoesNotExist: If no user has that id.
    """
    admin = require(session, MustBeAdmin())
    owner = User.objects.get(pk=user_id)
    logger.info(
        'Admin %s is deleting all files of %s',
        admin.username,
        owner.username,
    )
    return delete_files_cascade(
        File.objects.filter(owner_id=owner.pk),
        owner_id=owner.pk,
    )


def download(session: Session | None, file_id: int) -> Download:
    """Open a file's content for the caller.

    Inactive files keep their metadata but cannot be downloaded.

    Args:
        session: Caller's session.
        file_id: File to download.

    Returns:
        Stream plus the metadata for the response envelope.

    Raises:
        ValidationError: If the file has been deactivated.
    """
    user, file_instance = _get_authorized_file(session, file_id)
    if file_instance.status != FileStatus.ACTIVE:
        raise ValidationError({'status': 'File is inactive'})
    stream = get_file_storage().open_for_read(file_instance.get_storage_path())

    File.objects.filter(pk=file_instance.pk).update(
        download_count=F('download_count') + 1,
        last_accessed_at=timezone.now(),
    )
    logger.info(
        'File downloaded by %s: %s (ID: %d)',
        user.username,
        file_instance.filename,
        file_id,
    )

    return Download(
        stream=stream,
        content_type=file_instance.content_type,
        filename=file_instance.filename,
        size_bytes=file_instance.size_bytes,
    )
