"""Tests for the cascade coordinator."""

import pytest
from django.core.files.base import ContentFile

from server.apps.accounts.logic.authorizer import resolve_user
from server.apps.accounts.models import Session, User
from server.apps.files.logic import file_registry
from server.apps.files.logic.cascade import (
    delete_file_cascade,
    delete_files_cascade,
    delete_user_cascade,
)
from server.apps.files.models import File

_BUCKET = 'files-manager'
_PDF = b'%PDF-1.4\n'


def _upload(session, filename):
    return file_registry.upload(
        session,
        filename,
        ContentFile(_PDF, name=filename),
    )


@pytest.mark.django_db
def test_delete_file_cascade(user, user_session, mock_s3):
    """Test file row, list entry and content go together."""
    file_instance = _upload(user_session, 'a.pdf')

    delete_file_cascade(file_instance)

    user.refresh_from_db()
    assert user.file_ids == []
    assert not File.objects.exists()
    assert list(mock_s3.Bucket(_BUCKET).objects.all()) == []


@pytest.mark.django_db
def test_delete_files_cascade_clears_owner_lists(
    user,
    other_user,
    user_session,
    other_session,
    mock_s3,
):
    """Test bulk deletion clears only the affected owners."""
    _upload(user_session, 'a.pdf')
    kept = _upload(other_session, 'b.pdf')

    deleted = delete_files_cascade(File.objects.filter(owner=user))

    assert deleted == 1
    user.refresh_from_db()
    other_user.refresh_from_db()
    assert user.file_ids == []
    assert other_user.file_ids == [kept.id]


@pytest.mark.django_db
def test_delete_user_cascade(user, user_session, mock_s3):
    """Test files, then sessions, then the user are removed."""
    _upload(user_session, 'a.pdf')
    _upload(user_session, 'b.pdf')

    result = delete_user_cascade(user.id)

    assert result.user_deleted
    assert result.files_deleted == 2
    assert result.sessions_deleted == 1
    assert not User.objects.filter(pk=user.pk).exists()
    assert not Session.objects.exists()
    assert list(mock_s3.Bucket(_BUCKET).objects.all()) == []
    assert resolve_user(user_session) is None


@pytest.mark.django_db
def test_delete_user_cascade_twice(user, mock_s3):
    """Test deleting an already deleted user is a no-op."""
    assert delete_user_cascade(user.id).user_deleted is True

    second = delete_user_cascade(user.id)

    assert second.user_deleted is False
    assert second.files_deleted == 0
