"""Language catalogue operations.

Any logged in user may read the catalogue; only admins change it.
"""

import logging
from typing import Any

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from server.apps.accounts.logic.authorizer import (
    MustBeAdmin,
    MustBeAuthenticated,
    require,
)
from server.apps.accounts.models import Session
from server.apps.languages.models import Language

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGE = 'Language already exists'


def _check_name_free(name: str, exclude_pk: int | None = None) -> None:
    duplicates = Language.objects.filter(name=name)
    if exclude_pk is not None:
        duplicates = duplicates.exclude(pk=exclude_pk)
    if duplicates.exists():
        raise ValidationError({'name': _DUPLICATE_MESSAGE})


def create_language(
    session: Session | None,
    name: str,
    display_name: str,
) -> Language:
    """Add a language to the catalogue (admin only).

    Args:
        session: Caller's session.
        name: Unique language code.
        display_name: Human readable name.

    Returns:
        Created Language.

    Raises:
        ValidationError: If a field is missing or the name is taken.
    """
    admin = require(session, MustBeAdmin())

    name = (name or '').strip()
    display_name = (display_name or '').strip()
    errors: dict[str, str] = {}
    if not name:
        errors['name'] = 'Name is required'
    if not display_name:
        errors['display_name'] = 'Display name is required'
    if errors:
        raise ValidationError(errors)

    _check_name_free(name)
    try:
        with transaction.atomic():
            language = Language.objects.create(
                name=name,
                display_name=display_name,
                created_by=admin.username,
            )
    except IntegrityError as error:
        raise ValidationError({'name': _DUPLICATE_MESSAGE}) from error

    logger.info('Language created by %s: %s', admin.username, name)
    return language


def update_language(
    session: Session | None,
    language_id: int,
    name: str | None = None,
    display_name: str | None = None,
) -> Language:
    """Change a language's name or display name (admin only).

    Empty values leave the field unchanged.

    Args:
        session: Caller's session.
        language_id: Language to update.
        name: New code.
        display_name: New human readable name.

    Returns:
        Updated Language.

    Raises:
        Language.DoesNotExist: If no language has that id.
        ValidationError: If the new name is taken.
    """
    admin = require(session, MustBeAdmin())
    language = Language.objects.get(pk=language_id)

    if name and name.strip() != language.name:
        _check_name_free(name.strip(), exclude_pk=language.pk)
        language.name = name.strip()
    if display_name and display_name.strip():
        language.display_name = display_name.strip()

    try:
        with transaction.atomic():
            language.save(update_fields=['name', 'display_name'])
    except IntegrityError as error:
        raise ValidationError({'name': _DUPLICATE_MESSAGE}) from error

    logger.info('Language updated by %s: %s', admin.username, language.name)
    return language


def delete_language(session: Session | None, language_id: int) -> None:
    """Remove a language from the catalogue (admin only).

    Raises:
        Language.DoesNotExist: If no language has that id.
    """
    admin = require(session, MustBeAdmin())
    language = Language.objects.get(pk=language_id)
    language.delete()
    logger.info('Language deleted by %s: %s', admin.username, language.name)


def list_languages(session: Session | None) -> list[Language]:
    require(session, MustBeAuthenticated())
    return list(Language.objects.all())


def get_language(session: Session | None, language_id: int) -> Language:
    require(session, MustBeAuthenticated())
    return Language.objects.get(pk=language_id)


def present_language(language: Language) -> dict[str, Any]:
    """Serialize a language for JSON responses."""
    return {
        'id': language.id,
        'name': language.name,
        'display_name': language.display_name,
        'translations': language.translations,
        'created_by': language.created_by,
        'created_at': language.created_at.isoformat(),
    }
