"""Tests for clear_expired_sessions management command."""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from server.apps.accounts.logic.session_store import create_session
from server.apps.accounts.models import Session


@pytest.fixture
def expired_session(user):
    """Session whose expiry time has passed."""
    session = create_session(user)
    Session.objects.filter(pk=session.pk).update(
        expires_at=timezone.now() - timedelta(minutes=1),
    )
    return session


@pytest.mark.django_db
def test_clear_expired_sessions(user_session, expired_session):
    """Test expired sessions are deleted and live ones kept."""
    out = StringIO()

    call_command('clear_expired_sessions', stdout=out)

    assert 'Deleted 1 expired sessions' in out.getvalue()
    assert list(Session.objects.all()) == [user_session]


@pytest.mark.django_db
def test_clear_expired_sessions_dry_run(user_session, expired_session):
    """Test dry run only reports."""
    out = StringIO()

    call_command('clear_expired_sessions', '--dry-run', stdout=out)

    assert 'Would delete 1 expired sessions' in out.getvalue()
    assert Session.objects.count() == 2
