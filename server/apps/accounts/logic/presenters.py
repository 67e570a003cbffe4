"""Response payloads for users and sessions."""

from typing import Any

from server.apps.accounts.models import Session, User


def present_user(user: User) -> dict[str, Any]:
    """Serialize a user without credentials.

    Args:
        user: User to serialize.

    Returns:
        JSON-compatible dictionary.
    """
    return {
        'id': user.pk,
        'username': user.username,
        'email': user.email,
        'role': user.role,
        'files': list(user.file_ids),
        'date_joined': user.date_joined.isoformat(),
    }


def present_session(session: Session) -> dict[str, Any]:
    """Serialize a session, exposing only a prefix of its key.

    Args:
        session: Session to serialize.

    Returns:
        JSON-compatible dictionary.
    """
    return {
        'id': session.pk,
        'key_prefix': session.session_key[:8],
        'user_id': session.user_id,
        'username': session.user.username,
        'cookie': {
            'path': session.cookie_path,
            'expires': session.expires_at.isoformat(),
            'original_max_age': session.original_max_age,
            'http_only': session.http_only,
            'secure': session.secure,
            'same_site': session.same_site,
        },
        'ip_address': session.ip_address,
        'user_agent': session.user_agent,
        'created_at': session.created_at.isoformat(),
        'updated_at': session.updated_at.isoformat(),
    }
