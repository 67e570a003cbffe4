"""Metadata extraction utilities for files."""

import hashlib
import mimetypes
import secrets
from pathlib import PurePosixPath, PureWindowsPath
from typing import Any, BinaryIO, Final

from django.core.exceptions import ValidationError

_CHUNK_SIZE: Final = 8192  # 8KB chunks for checksum calculation
_STORAGE_KEY_BYTES: Final = 16

FILENAME_MAX_LENGTH: Final = 255


def detect_mime_type(filename: str) -> str:
    """Guess MIME type from the filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return 'application/octet-stream'
    return mime_type


def calculate_checksum(file_obj: BinaryIO) -> str:
    """Calculate SHA256 checksum of file.

    Reads file in chunks to handle large files efficiently.
    Resets file pointer to beginning after calculation.

    Args:
        file_obj: File-like object to checksum.

    Returns:
        Hex-encoded SHA256 hash string.
    """
    sha256_hash = hashlib.sha256()

    file_obj.seek(0)

    for chunk in iter(lambda: file_obj.read(_CHUNK_SIZE), b''):
        sha256_hash.update(chunk)

    file_obj.seek(0)

    return sha256_hash.hexdigest()


def get_file_size(file_obj: Any) -> int:
    """Get file size from file object.

    Args:
        file_obj: File-like object, Django files expose ``size``.

    Returns:
        File size in bytes.
    """
    if hasattr(file_obj, 'size'):
        return file_obj.size
    file_size = len(file_obj.read())
    file_obj.seek(0)
    return file_size


def normalize_filename(candidate: str) -> str:
    """Reduce a client supplied name to its final path component.

    Both POSIX and Windows separators are stripped.

    Args:
        candidate: Name sent by the client.

    Returns:
        Bare filename.

    Raises:
        ValidationError: If nothing usable remains or the name is too long.
    """
    filename = PureWindowsPath(PurePosixPath(candidate or '').name).name
    filename = filename.strip()
    if filename in {'', '.', '..'}:
        raise ValidationError('Filename cannot be empty')
    if len(filename) > FILENAME_MAX_LENGTH:
        raise ValidationError(
            f'Filename is too long (max: {FILENAME_MAX_LENGTH} characters)',
        )
    return filename


def split_filename(filename: str) -> tuple[str, str]:
    """Split a filename into stem and extension.

    Only the last suffix counts: 'a.tar.gz' -> ('a.tar', '.gz').
    Dotfiles have no extension: '.env' -> ('.env', '').

    Args:
        filename: Bare filename.

    Returns:
        Tuple of (stem, extension including the dot).
    """
    extension = PurePosixPath(filename).suffix
    if not extension:
        return filename, ''
    return filename[:-len(extension)], extension


def generate_storage_key(owner_id: int, filename: str) -> str:
    """Build a fresh storage key for an upload.

    The key keeps the extension for content-type sniffing by storage
    consoles, but is otherwise random and independent of the filename.

    Args:
        owner_id: Owner's user ID.
        filename: Display filename.

    Returns:
        Storage key like '12/3f2a...9c.pdf'.
    """
    _, extension = split_filename(filename)
    token = secrets.token_hex(_STORAGE_KEY_BYTES)
    return f'{owner_id}/{token}{extension.lower()}'
