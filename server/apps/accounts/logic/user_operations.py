"""Business logic for user accounts."""

import logging

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction

from server.apps.accounts.logic.authorizer import (
    MustBeAdmin,
    MustBeAuthenticated,
    require,
)
from server.apps.accounts.models import Session, User
from server.apps.files.logic.cascade import CascadeResult, delete_user_cascade

logger = logging.getLogger(__name__)


def get_user(session: Session | None, user_id: int) -> User:
    """Fetch any user (admin only).

    Args:
        session: Caller's session.
        user_id: User to fetch.

    Returns:
        User instance.

    Raises:
        User.DoesNotExist: If no user has that id.
    """
    require(session, MustBeAdmin())
    return User.objects.get(pk=user_id)


def list_users(session: Session | None) -> list[User]:
    """List every user (admin only).

    Args:
        session: Caller's session.

    Returns:
        Users ordered by id.
    """
    require(session, MustBeAdmin())
    return list(User.objects.order_by('id'))


def update_profile(session: Session | None, email: str) -> User:
    """Change the caller's email address.

    Args:
        session: Caller's session.
        email: New email, must not belong to another user.

    Returns:
        Updated User instance.

    Raises:
        ValidationError: If email is missing, malformed or taken.
    """
    user = require(session, MustBeAuthenticated())

    if not email:
        raise ValidationError({'email': 'Email is required'})

    if User.objects.filter(email=email).exclude(pk=user.pk).exists():
        raise ValidationError(
            {'email': f'{email} already exists. Use a different email'},
        )

    try:
        validate_email(email)
    except ValidationError as error:
        raise ValidationError({'email': error.messages}) from error

    user.email = email
    user.save(update_fields=['email'])

    logger.info('Profile updated for user %s', user.username)
    return user


def change_password(
    session: Session | None,
    old_password: str,
    new_password: str,
) -> User:
    """Change the caller's password after verifying the old one.

    Args:
        session: Caller's session.
        old_password: Current password.
        new_password: Replacement password.

    Returns:
        Updated User instance.

    Raises:
        ValidationError: If the old password does not verify or the new
            one is missing.
    """
    user = require(session, MustBeAuthenticated())

    if not user.check_password(old_password):
        logger.warning('Password change rejected for user %s', user.username)
        raise ValidationError({'old_password': 'Current password is wrong'})
    if not new_password:
        raise ValidationError({'new_password': 'New password is required'})

    user.set_password(new_password)
    user.save(update_fields=['password'])

    logger.info('Password changed for user %s', user.username)
    return user


def delete_my_account(session: Session | None) -> CascadeResult:
    """Delete the caller's account with its files and sessions.

    Args:
        session: Caller's session.

    Returns:
        What the cascade removed.
    """
    user = require(session, MustBeAuthenticated())
    logger.info('User %s is deleting their account', user.username)
    return delete_user_cascade(user.pk)


def delete_user(session: Session | None, user_id: int) -> CascadeResult:
    """Delete any user with their files and sessions (admin only).

    Args:
        session: Caller's session.
        user_id: User to delete.

    Returns:
        What the cascade removed.

    Raises:
        User.DoesNotExist: If no user has that id.
    """
    admin = require(session, MustBeAdmin())
    target = User.objects.get(pk=user_id)

    logger.info(
        'Admin %s is deleting user %s (ID: %d)',
        admin.username,
        target.username,
        target.pk,
    )
    return delete_user_cascade(target.pk)


def delete_all_users(session: Session | None) -> int:
    """Delete every user except the acting admin (admin only).

    Args:
        session: Caller's session.

    Returns:
        Number of users deleted.
    """
    admin = require(session, MustBeAdmin())
    user_ids = list(
        User.objects.exclude(pk=admin.pk).values_list('pk', flat=True),
    )

    deleted = 0
    with transaction.atomic():
        for user_id in user_ids:
            if delete_user_cascade(user_id).user_deleted:
                deleted += 1

    logger.info('Admin %s deleted %d users', admin.username, deleted)
    return deleted
