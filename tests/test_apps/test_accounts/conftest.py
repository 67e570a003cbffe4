"""Shared fixtures for accounts app tests."""

import boto3
import pytest
from django.conf import settings
from moto import mock_aws

from server.apps.accounts.logic.session_store import create_session
from server.apps.accounts.models import Role, User


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def admin_user(db):
    """Create a user holding the admin role.

    Returns:
        Admin user instance.
    """
    return User.objects.create_user(
        username='adminuser',
        password='adminpass123',
        email='admin@example.com',
        role=Role.ADMIN,
    )


@pytest.fixture
def user_session(user):
    """Live session of the test user."""
    return create_session(user)


@pytest.fixture
def other_session(other_user):
    """Live session of the second test user."""
    return create_session(other_user)


@pytest.fixture
def admin_session(admin_user):
    """Live session of the admin."""
    return create_session(admin_user)


@pytest.fixture
def mock_s3():
    """Mock S3 service with files-manager bucket.

    Yields:
        boto3 S3 resource with files-manager bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket='files-manager')
        yield conn


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
