"""Role-based access control decision procedure.

Every operation on users, files, sessions and languages states what it
needs as a requirement value and asks :func:`require` (or
:func:`authorize`) for a decision. No other code checks roles.

Decision order:

1. No session, an expired or revoked session, or a session whose user
   is gone or inactive is denied as not authenticated.
2. ``MustBeAdmin`` is denied unless the user is an admin.
3. ``MustOwn(owner_id)`` is denied unless the user is the owner or an
   admin. The admin override is the same for every resource type.
4. Anything else is allowed.
"""

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.utils import timezone

from server.apps.accounts.exceptions import (
    NotAuthenticatedError,
    NotAuthorizedError,
)
from server.apps.accounts.models import Session

if TYPE_CHECKING:
    from server.apps.accounts.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MustBeAuthenticated:
    """Any valid session is enough."""


@dataclass(frozen=True, slots=True)
class MustBeAdmin:
    """The session's user must hold the admin role."""


@dataclass(frozen=True, slots=True)
class MustOwn:
    """The session's user must own the resource, or be an admin."""

    owner_id: int


Requirement = MustBeAuthenticated | MustBeAdmin | MustOwn


class DenialReason(enum.Enum):
    """Why a request was denied."""

    NOT_AUTHENTICATED = 'not_authenticated'
    NOT_AUTHORIZED = 'not_authorized'


@dataclass(frozen=True, slots=True)
class Allowed:
    """Positive decision carrying the resolved user."""

    user: 'User'


@dataclass(frozen=True, slots=True)
class Denied:
    """Negative decision."""

    reason: DenialReason


Decision = Allowed | Denied


def resolve_user(session: Session | None) -> 'User | None':
    """Resolve the user behind a session.

    The session row is re-read so a session that was ended, revoked or
    cascaded away after the caller loaded it no longer resolves.

    Args:
        session: Session presented by the caller.

    Returns:
        Active user bound to a live session, None otherwise.
    """
    if session is None or session.pk is None:
        return None

    live_session = Session.objects.select_related('user').filter(
        pk=session.pk,
        expires_at__gt=timezone.now(),
    ).first()

    if live_session is None:
        return None

    user = live_session.user
    if not user.is_active:
        return None
    return user


def authorize(session: Session | None, requirement: Requirement) -> Decision:
    """Decide whether the session satisfies the requirement.

    Args:
        session: Session presented by the caller.
        requirement: What the operation needs.

    Returns:
        Allowed with the resolved user, or Denied with a reason.
    """
    user = resolve_user(session)
    if user is None:
        return Denied(DenialReason.NOT_AUTHENTICATED)

    if isinstance(requirement, MustBeAdmin) and not user.is_admin:
        return Denied(DenialReason.NOT_AUTHORIZED)

    if isinstance(requirement, MustOwn):
        if user.id != requirement.owner_id and not user.is_admin:
            return Denied(DenialReason.NOT_AUTHORIZED)

    return Allowed(user)


def require(session: Session | None, requirement: Requirement) -> 'User':
    """Authorize or raise.

    Args:
        session: Session presented by the caller.
        requirement: What the operation needs.

    Returns:
        The resolved user.

    Raises:
        NotAuthenticatedError: If there is no valid session.
        NotAuthorizedError: If the user lacks role or ownership.
    """
    decision = authorize(session, requirement)

    if isinstance(decision, Allowed):
        return decision.user

    if decision.reason is DenialReason.NOT_AUTHENTICATED:
        raise NotAuthenticatedError()

    logger.warning(
        'Denied %s for session %s',
        type(requirement).__name__,
        session.session_key[:8] if session else '-',
    )
    raise NotAuthorizedError()
