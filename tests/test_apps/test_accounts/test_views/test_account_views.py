"""Tests for account and session endpoints."""

import json
from datetime import timedelta

import pytest
from django.conf import settings
from django.utils import timezone

from server.apps.accounts.models import Session, User

_JSON = 'application/json'


@pytest.mark.django_db
def test_register(client):
    """Test registration returns the new user without credentials."""
    response = client.post(
        '/register',
        data={
            'username': 'newuser',
            'email': 'new@example.com',
            'password': 'secret123',
        },
        content_type=_JSON,
    )

    assert response.status_code == 201
    body = response.json()
    assert body['user']['username'] == 'newuser'
    assert body['user']['role'] == 'user'
    assert 'password' not in body['user']


@pytest.mark.django_db
def test_register_duplicate_is_bad_request(client, user):
    """Test duplicate usernames are a 400 with field errors."""
    response = client.post(
        '/register',
        data={
            'username': user.username,
            'email': 'fresh@example.com',
            'password': 'secret123',
        },
        content_type=_JSON,
    )

    assert response.status_code == 400
    assert 'username' in response.json()['errors']


@pytest.mark.django_db
def test_register_invalid_json(client):
    """Test malformed bodies are a 400."""
    response = client.post('/register', data='{', content_type=_JSON)

    assert response.status_code == 400


@pytest.mark.django_db
def test_login_sets_cookie(client, user):
    """Test login sets the session cookie with stored attributes."""
    response = client.post(
        '/login',
        data={'username': 'testuser', 'password': 'testpass123'},
        content_type=_JSON,
        HTTP_USER_AGENT='pytest-client',
    )

    assert response.status_code == 200
    cookie = response.cookies[settings.ACCOUNTS_SESSION_COOKIE_NAME]
    session = Session.objects.get(session_key=cookie.value)
    assert session.user == user
    assert session.user_agent == 'pytest-client'
    assert cookie['httponly']
    assert cookie['max-age'] == session.original_max_age


@pytest.mark.django_db
def test_login_wrong_password(client, user):
    """Test wrong credentials are a 401."""
    response = client.post(
        '/login',
        data={'username': 'testuser', 'password': 'nope'},
        content_type=_JSON,
    )

    assert response.status_code == 401
    assert response.json()['message'] == 'Invalid username or password'


@pytest.mark.django_db
def test_login_when_logged_in(login_as, user_session):
    """Test logging in from a live session is a 401."""
    response = login_as(user_session).post(
        '/login',
        data={'username': 'testuser', 'password': 'testpass123'},
        content_type=_JSON,
    )

    assert response.status_code == 401


@pytest.mark.django_db
def test_logout_twice(login_as, user_session):
    """Test the second logout is a 401."""
    client = login_as(user_session)

    first = client.get('/logout')
    client.cookies[settings.ACCOUNTS_SESSION_COOKIE_NAME] = (
        user_session.session_key
    )
    second = client.get('/logout')

    assert first.status_code == 200
    assert second.status_code == 401


@pytest.mark.django_db
def test_logout_wrong_method(login_as, user_session):
    """Test wrong methods are a 405."""
    response = login_as(user_session).post('/logout')

    assert response.status_code == 405


@pytest.mark.django_db
def test_getsession(login_as, user_session):
    """Test the caller sees their own session, key truncated."""
    response = login_as(user_session).get('/getsession')

    assert response.status_code == 200
    payload = response.json()['session']
    assert payload['key_prefix'] == user_session.session_key[:8]
    assert user_session.session_key not in json.dumps(payload)


@pytest.mark.django_db
def test_request_records_session_activity(login_as, user_session):
    """Test an authenticated request bumps the session's activity time."""
    stale = timezone.now() - timedelta(minutes=30)
    Session.objects.filter(pk=user_session.pk).update(updated_at=stale)

    login_as(user_session).get('/getsession')

    user_session.refresh_from_db()
    assert user_session.updated_at > stale


@pytest.mark.django_db
def test_getsession_anonymous(client):
    """Test no cookie is a 401."""
    assert client.get('/getsession').status_code == 401


@pytest.mark.django_db
def test_allusers_admin(login_as, admin_session, user):
    """Test admin user listing carries the total count header."""
    response = login_as(admin_session).get('/allusers')

    assert response.status_code == 200
    assert response['X-Total-Count'] == '2'
    assert len(response.json()['users']) == 2


@pytest.mark.django_db
def test_allusers_regular_user(login_as, user_session):
    """Test regular users get a 401."""
    assert login_as(user_session).get('/allusers').status_code == 401


@pytest.mark.django_db
def test_user_detail_not_found(login_as, admin_session):
    """Test unknown ids are a 404."""
    assert login_as(admin_session).get('/users/99999').status_code == 404


@pytest.mark.django_db
def test_my_profile(login_as, user_session, user):
    """Test email update."""
    response = login_as(user_session).put(
        '/myProfile',
        data={'email': 'changed@example.com'},
        content_type=_JSON,
    )

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.email == 'changed@example.com'


@pytest.mark.django_db
def test_my_password_wrong_old(login_as, user_session):
    """Test wrong old password is a 400."""
    response = login_as(user_session).put(
        '/myPassword',
        data={'old_password': 'wrong', 'new_password': 'newpass456'},
        content_type=_JSON,
    )

    assert response.status_code == 400
    assert response.json()['message'] == 'Current password is wrong'


@pytest.mark.django_db
def test_delete_my_account(login_as, user_session, user, mock_s3):
    """Test self deletion clears the cookie."""
    response = login_as(user_session).delete('/deleteMyAccount')

    assert response.status_code == 200
    assert not User.objects.filter(pk=user.pk).exists()
    assert response.cookies[settings.ACCOUNTS_SESSION_COOKIE_NAME].value == ''


@pytest.mark.django_db
def test_delete_user_by_admin(login_as, admin_session, user, mock_s3):
    """Test admin deletion of another user."""
    response = login_as(admin_session).delete(f'/deleteUser/{user.id}')

    assert response.status_code == 200
    assert not User.objects.filter(pk=user.pk).exists()


@pytest.mark.django_db
def test_delete_all_users(login_as, admin_session, user, other_user, mock_s3):
    """Test bulk deletion reports the count."""
    response = login_as(admin_session).delete('/deleteAllUsers')

    assert response.status_code == 200
    assert response.json()['users_deleted'] == 2


@pytest.mark.django_db
def test_get_all_sessions(login_as, admin_session, user_session):
    """Test admin session listing."""
    response = login_as(admin_session).get('/getAllSessions')

    assert response.status_code == 200
    assert response['X-Total-Count'] == '2'


@pytest.mark.django_db
def test_get_session_by_user_id_other(login_as, user_session, other_user):
    """Test users cannot list other users' sessions."""
    response = login_as(user_session).get(
        f'/getSessionByUserId/{other_user.id}',
    )

    assert response.status_code == 401


@pytest.mark.django_db
def test_get_session_by_user_id_empty(login_as, admin_session, other_user):
    """Test an empty listing is a 200 with zero count."""
    response = login_as(admin_session).get(
        f'/getSessionByUserId/{other_user.id}',
    )

    assert response.status_code == 200
    assert response.json()['sessions'] == []
    assert response['X-Total-Count'] == '0'


@pytest.mark.django_db
def test_revoke_session(login_as, admin_session, user_session):
    """Test revoked sessions stop working."""
    client = login_as(admin_session)

    response = client.delete(f'/revokeSession/{user_session.pk}')

    assert response.status_code == 200
    assert not Session.objects.filter(pk=user_session.pk).exists()
