"""Tests for the authorization decision procedure."""

from datetime import timedelta

import pytest
from django.utils import timezone

from server.apps.accounts.exceptions import (
    NotAuthenticatedError,
    NotAuthorizedError,
)
from server.apps.accounts.logic.authorizer import (
    Allowed,
    Denied,
    DenialReason,
    MustBeAdmin,
    MustBeAuthenticated,
    MustOwn,
    authorize,
    require,
    resolve_user,
)
from server.apps.accounts.logic.session_store import end_session
from server.apps.accounts.models import Session


@pytest.mark.django_db
@pytest.mark.parametrize('requirement', [
    MustBeAuthenticated(),
    MustBeAdmin(),
    MustOwn(1),
])
def test_no_session_is_not_authenticated(requirement):
    """Test every requirement denies a missing session."""
    assert authorize(None, requirement) == Denied(
        DenialReason.NOT_AUTHENTICATED,
    )


@pytest.mark.django_db
def test_authenticated_user_allowed(user, user_session):
    """Test any live session satisfies MustBeAuthenticated."""
    assert authorize(user_session, MustBeAuthenticated()) == Allowed(user)


@pytest.mark.django_db
def test_user_role_denied_admin(user_session):
    """Test a user-role session is always denied MustBeAdmin."""
    decision = authorize(user_session, MustBeAdmin())

    assert decision == Denied(DenialReason.NOT_AUTHORIZED)


@pytest.mark.django_db
def test_admin_allowed_admin(admin_user, admin_session):
    """Test admins satisfy MustBeAdmin."""
    assert authorize(admin_session, MustBeAdmin()) == Allowed(admin_user)


@pytest.mark.django_db
def test_owner_allowed(user, user_session):
    """Test owners satisfy MustOwn on their resources."""
    assert authorize(user_session, MustOwn(user.id)) == Allowed(user)


@pytest.mark.django_db
def test_non_owner_denied(other_user, user_session):
    """Test MustOwn denies other users."""
    decision = authorize(user_session, MustOwn(other_user.id))

    assert decision == Denied(DenialReason.NOT_AUTHORIZED)


@pytest.mark.django_db
def test_admin_overrides_ownership(admin_user, user, admin_session):
    """Test admins satisfy MustOwn for anyone's resources."""
    assert authorize(admin_session, MustOwn(user.id)) == Allowed(admin_user)


@pytest.mark.django_db
def test_expired_session_not_authenticated(user_session):
    """Test expiry is checked at decision time."""
    Session.objects.filter(pk=user_session.pk).update(
        expires_at=timezone.now() - timedelta(seconds=1),
    )

    assert resolve_user(user_session) is None
    assert authorize(user_session, MustBeAuthenticated()) == Denied(
        DenialReason.NOT_AUTHENTICATED,
    )


@pytest.mark.django_db
def test_ended_session_not_authenticated(user_session):
    """Test a stale in-memory session no longer resolves."""
    end_session(user_session.session_key)

    assert resolve_user(user_session) is None


@pytest.mark.django_db
def test_inactive_user_not_authenticated(user, user_session):
    """Test deactivated accounts lose their sessions' rights."""
    user.is_active = False
    user.save(update_fields=['is_active'])

    assert resolve_user(user_session) is None


@pytest.mark.django_db
def test_require_returns_user(user, user_session):
    """Test require hands back the resolved user."""
    assert require(user_session, MustBeAuthenticated()) == user


@pytest.mark.django_db
def test_require_raises_not_authenticated():
    """Test require raises for a missing session."""
    with pytest.raises(NotAuthenticatedError):
        require(None, MustBeAuthenticated())


@pytest.mark.django_db
def test_require_raises_not_authorized(user_session):
    """Test require raises for insufficient role."""
    with pytest.raises(NotAuthorizedError):
        require(user_session, MustBeAdmin())
