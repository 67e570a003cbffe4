"""Session store: create, look up, list and destroy login sessions.

Sessions are passed explicitly to the authenticator and authorizer;
nothing here reads ambient request state. Expiry is passive: an expired
session is discarded when it is looked up, and the
``clear_expired_sessions`` command sweeps the rest.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Final

from django.conf import settings
from django.utils import timezone

from server.apps.accounts.logic.authorizer import (
    MustBeAdmin,
    MustBeAuthenticated,
    MustOwn,
    require,
)
from server.apps.accounts.models import Session

if TYPE_CHECKING:
    from server.apps.accounts.models import User

logger = logging.getLogger(__name__)

# Session key length in bytes (generates 64 hex chars)
_SESSION_KEY_BYTES: Final = 32

_USER_AGENT_MAX_LENGTH: Final = 255


@dataclass(frozen=True, slots=True)
class CookieSettings:
    """Cookie attributes the transport layer used for a session."""

    max_age: int
    path: str = '/'
    http_only: bool = True
    secure: bool = False
    same_site: str = 'Lax'


def get_session_timeout() -> int:
    """Get session lifetime in seconds.

    Returns:
        Timeout in seconds from settings or default of 3600 (1 hour).
    """
    return getattr(settings, 'ACCOUNTS_SESSION_TIMEOUT', 3600)


def get_cookie_settings() -> CookieSettings:
    """Build the cookie attributes configured for new sessions.

    Returns:
        CookieSettings populated from Django settings.
    """
    return CookieSettings(
        max_age=get_session_timeout(),
        path=getattr(settings, 'ACCOUNTS_SESSION_COOKIE_PATH', '/'),
        http_only=getattr(settings, 'ACCOUNTS_SESSION_COOKIE_HTTPONLY', True),
        secure=getattr(settings, 'ACCOUNTS_SESSION_COOKIE_SECURE', False),
        same_site=getattr(settings, 'ACCOUNTS_SESSION_COOKIE_SAMESITE', 'Lax'),
    )


def create_session(
    user: 'User',
    cookie: CookieSettings | None = None,
    ip_address: str | None = None,
    user_agent: str = '',
) -> Session:
    """Create a new session for the user.

    Any number of sessions may exist per user; every login creates one.

    Args:
        user: Authenticated user.
        cookie: Cookie attributes from the transport, defaults to settings.
        ip_address: Client IP address.
        user_agent: Client user agent string.

    Returns:
        Created Session instance.
    """
    cookie = cookie or get_cookie_settings()
    session_key = secrets.token_hex(_SESSION_KEY_BYTES)

    session = Session.objects.create(
        user=user,
        session_key=session_key,
        cookie_path=cookie.path,
        original_max_age=cookie.max_age,
        http_only=cookie.http_only,
        secure=cookie.secure,
        same_site=cookie.same_site,
        expires_at=timezone.now() + timedelta(seconds=cookie.max_age),
        ip_address=ip_address,
        user_agent=user_agent[:_USER_AGENT_MAX_LENGTH],
    )

    logger.info(
        'Session created for user %s: %s',
        user.username,
        session_key[:8],
    )

    return session


def get_session(session_key: str | None) -> Session | None:
    """Get a live session by key.

    Expired sessions are deleted on sight and reported as missing.

    Args:
        session_key: Session key from the transport credential.

    Returns:
        Session if found and not expired, None otherwise.
    """
    if not session_key:
        return None

    try:
        session = Session.objects.select_related('user').get(
            session_key=session_key,
        )
    except Session.DoesNotExist:
        return None

    if session.is_expired():
        logger.info('Discarding expired session: %s', session_key[:8])
        session.delete()
        return None

    return session


def touch_session(session_key: str) -> bool:
    """Update the last activity timestamp of a session.

    Args:
        session_key: Session key to update.

    Returns:
        True if session was found and updated, False otherwise.
    """
    updated = Session.objects.filter(
        session_key=session_key,
    ).update(
        updated_at=timezone.now(),
    )

    return updated > 0


def end_session(session_key: str) -> bool:
    """Destroy a session.

    Args:
        session_key: Session key to end.

    Returns:
        True if session was found and deleted, False otherwise.
    """
    deleted, _ = Session.objects.filter(
        session_key=session_key,
    ).delete()

    if deleted:
        logger.info('Session ended: %s', session_key[:8])

    return deleted > 0


def end_user_sessions(user_id: int) -> int:
    """Destroy every session of a user.

    Args:
        user_id: Owner of the sessions.

    Returns:
        Number of sessions deleted.
    """
    deleted, _ = Session.objects.filter(user_id=user_id).delete()

    if deleted:
        logger.info('Ended %d sessions of user ID=%d', deleted, user_id)

    return deleted


def cleanup_expired_sessions() -> int:
    """Remove sessions whose expiry time has passed.

    Returns:
        Number of sessions cleaned up.
    """
    deleted, _ = Session.objects.filter(
        expires_at__lte=timezone.now(),
    ).delete()

    if deleted:
        logger.info('Cleaned up %d expired sessions', deleted)

    return deleted


def get_user_sessions(user_id: int) -> list[Session]:
    """Get all live sessions of a user.

    Args:
        user_id: User to get sessions for.

    Returns:
        List of Session instances, newest first.
    """
    return list(
        Session.objects.filter(
            user_id=user_id,
            expires_at__gt=timezone.now(),
        ).select_related('user'),
    )


def current_session(session: Session | None) -> Session:
    """Return the caller's own session after validating it.

    Args:
        session: Caller's session.

    Returns:
        The same session.

    Raises:
        NotAuthenticatedError: If the session is missing or invalid.
    """
    require(session, MustBeAuthenticated())
    return session  # type: ignore[return-value]


def list_sessions(session: Session | None) -> list[Session]:
    """List every live session in the system (admin only).

    Args:
        session: Caller's session.

    Returns:
        List of Session instances, newest first.
    """
    require(session, MustBeAdmin())
    return list(
        Session.objects.filter(
            expires_at__gt=timezone.now(),
        ).select_related('user'),
    )


def list_sessions_for_user(
    session: Session | None,
    user_id: int,
) -> list[Session]:
    """List sessions of one user (the user themselves or an admin).

    Args:
        session: Caller's session.
        user_id: Owner of the sessions to list.

    Returns:
        List of Session instances, newest first.
    """
    require(session, MustOwn(user_id))
    return get_user_sessions(user_id)


def revoke_session(session: Session | None, session_pk: int) -> None:
    """Destroy another session (admin only).

    Args:
        session: Caller's session.
        session_pk: Primary key of the session to revoke.

    Raises:
        Session.DoesNotExist: If no session has that id.
    """
    admin = require(session, MustBeAdmin())
    target = Session.objects.get(pk=session_pk)
    end_session(target.session_key)
    logger.info(
        'Session %s revoked by admin %s',
        target.session_key[:8],
        admin.username,
    )
