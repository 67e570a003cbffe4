"""Filename collision resolution for uploads.

Filenames are unique across the whole system. When a candidate name is
taken, a counter is inserted before the extension::

    report.pdf -> report(1).pdf -> report(2).pdf -> ...

Probing starts at the counter stored on the record that holds the bare
name, so a long series of uploads does not rescan from 1 every time.
This is a probe, not a reservation: two uploads may pick the same name
concurrently, and the loser gets an IntegrityError from the unique
constraint and probes again (see ``file_registry.upload``).
"""

import logging
from typing import NamedTuple

from django.core.exceptions import ValidationError

from server.apps.files.infrastructure.metadata import (
    FILENAME_MAX_LENGTH,
    split_filename,
)
from server.apps.files.models import File

logger = logging.getLogger(__name__)


class ResolvedName(NamedTuple):
    """Outcome of a name probe."""

    name: str
    counter: int  # 0 when the candidate was free


def format_name(stem: str, extension: str, counter: int) -> str:
    """Build the numbered variant of a filename.

    The stem is cut short when the result would not fit the filename
    column.

    Args:
        stem: Filename without extension.
        extension: Extension including the dot, may be empty.
        counter: Collision counter.

    Returns:
        Name like 'report(2).pdf'.

    Raises:
        ValidationError: If even an empty stem would not fit.
    """
    suffix = f'({counter}){extension}'
    stem_length = FILENAME_MAX_LENGTH - len(suffix)
    if stem_length < 1:
        raise ValidationError(
            f'Filename is too long (max: {FILENAME_MAX_LENGTH} characters)',
        )
    return f'{stem[:stem_length]}{suffix}'


def resolve(candidate: str) -> ResolvedName:
    """Find the first free name for a candidate.

    Args:
        candidate: Normalized filename requested by the uploader.

    Returns:
        The candidate itself when free, otherwise the first free
        numbered variant.
    """
    stored_counter = (
        File.objects.filter(filename=candidate)
        .values_list('name_counter', flat=True)
        .first()
    )
    if stored_counter is None:
        return ResolvedName(candidate, 0)

    stem, extension = split_filename(candidate)
    counter = max(stored_counter, 1)
    name = format_name(stem, extension, counter)

    while File.objects.filter(filename=name).exists():
        counter += 1
        name = format_name(stem, extension, counter)

    logger.debug('Resolved name collision: %s -> %s', candidate, name)
    return ResolvedName(name, counter)


def remember_counter(candidate: str, counter: int) -> None:
    """Store the highest issued counter on the base record.

    Never lowers the stored value. A missing base record is ignored.

    Args:
        candidate: The bare name that collided.
        counter: Counter that was just used.
    """
    if counter <= 0:
        return
    File.objects.filter(
        filename=candidate,
        name_counter__lt=counter,
    ).update(name_counter=counter)
