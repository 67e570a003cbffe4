"""Shared fixtures for languages app tests."""

import pytest
from django.conf import settings

from server.apps.accounts.logic.session_store import create_session
from server.apps.accounts.models import Role, User
from server.apps.languages.models import Language


@pytest.fixture
def user_session(db):
    """Live session of a regular user."""
    user = User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )
    return create_session(user)


@pytest.fixture
def admin_session(db):
    """Live session of an admin."""
    admin = User.objects.create_user(
        username='adminuser',
        password='adminpass123',
        email='admin@example.com',
        role=Role.ADMIN,
    )
    return create_session(admin)


@pytest.fixture
def english(db):
    """Existing language record."""
    return Language.objects.create(
        name='en',
        display_name='English',
        created_by='adminuser',
    )


@pytest.fixture
def login_as(client):
    """Attach a session cookie to the test client.

    Returns:
        Function taking a Session and returning the client.
    """

    def factory(session):
        client.cookies[settings.ACCOUNTS_SESSION_COOKIE_NAME] = (
            session.session_key
        )
        return client

    return factory
