"""Registration, login and logout."""

import logging

from django.contrib.auth import authenticate as verify_credentials
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from server.apps.accounts.exceptions import (
    AlreadyAuthenticatedError,
    InvalidCredentialsError,
    NotAuthenticatedError,
)
from server.apps.accounts.logic import session_store
from server.apps.accounts.logic.authorizer import resolve_user
from server.apps.accounts.models import Session, User

logger = logging.getLogger(__name__)


def register(username: str, email: str, password: str) -> User:
    """Create a new account with the default user role.

    Args:
        username: Requested username, must be unused.
        email: Requested email, must be unused.
        password: Raw password, stored only as a hash.

    Returns:
        Created User instance.

    Raises:
        ValidationError: If a field is missing or already taken. The
            error carries one message per offending field.
    """
    errors: dict[str, str] = {}
    if not username:
        errors['username'] = 'Username is required'
    if not email:
        errors['email'] = 'Email is required'
    if not password:
        errors['password'] = 'Password is required'
    if errors:
        raise ValidationError(errors)

    if User.objects.filter(username=username).exists():
        errors['username'] = (
            f'{username} already exists. Use a different username'
        )
    if User.objects.filter(email=email).exists():
        errors['email'] = f'{email} already exists. Use a different email'
    if errors:
        logger.info('Registration rejected for %s: duplicate fields', username)
        raise ValidationError(errors)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                email=email,
                password=password,
            )
    except IntegrityError as error:
        # Lost a race with a concurrent registration
        raise ValidationError(
            'An account with this username or email already exists',
        ) from error

    logger.info('User registered: %s (ID: %d)', username, user.id)
    return user


def authenticate(
    username: str,
    password: str,
    current_session: Session | None = None,
    cookie: session_store.CookieSettings | None = None,
    ip_address: str | None = None,
    user_agent: str = '',
) -> Session:
    """Verify credentials and start a new session.

    Args:
        username: Username to log in as.
        password: Raw password to verify.
        current_session: Session the caller already presents, if any.
        cookie: Cookie attributes from the transport layer.
        ip_address: Client IP address.
        user_agent: Client user agent string.

    Returns:
        Newly created Session.

    Raises:
        ValidationError: If username or password is missing.
        AlreadyAuthenticatedError: If current_session is still valid.
        InvalidCredentialsError: If credentials do not verify.
    """
    if not username or not password:
        raise ValidationError('Username and password are required')

    logged_in_user = resolve_user(current_session)
    if logged_in_user is not None:
        logger.info('Rejected re-login for %s', logged_in_user.username)
        raise AlreadyAuthenticatedError(logged_in_user.username)

    # Django runs the hasher even for unknown users and rejects inactive
    # accounts, so every failure costs the same
    user = verify_credentials(username=username, password=password)
    if user is None:
        logger.warning('Authentication failed for user: %s', username)
        raise InvalidCredentialsError()

    logger.info('User authenticated successfully: %s', username)
    return session_store.create_session(
        user,
        cookie=cookie,
        ip_address=ip_address,
        user_agent=user_agent,
    )


def terminate(session: Session | None) -> None:
    """End the caller's session.

    Args:
        session: Session to end.

    Raises:
        NotAuthenticatedError: If there is no active session to end.
    """
    user = resolve_user(session)
    if user is None or not session_store.end_session(session.session_key):
        raise NotAuthenticatedError(
            'You are already logged out. You can log in again',
        )

    logger.info('User logged out: %s', user.username)
