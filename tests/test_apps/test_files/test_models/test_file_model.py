"""Tests for File model."""

import pytest
from django.db import IntegrityError
from django.db.models import ProtectedError

from server.apps.files.models import File, FileStatus


def _create(owner, filename='test.pdf', content=None):
    return File.objects.create(
        owner=owner,
        filename=filename,
        content=content or f'{owner.id}/abc.pdf',
        size_bytes=100,
        content_type='application/pdf',
        checksum_sha256='abcd' * 16,
    )


@pytest.mark.django_db
def test_file_model_str(user, mock_s3):
    """Test File __str__ method."""
    file_instance = _create(user)

    assert str(file_instance) == f'{user.username}:test.pdf'


@pytest.mark.django_db
def test_file_defaults(user, mock_s3):
    """Test defaults of a new record."""
    file_instance = _create(user)

    assert file_instance.status == FileStatus.ACTIVE
    assert file_instance.name_counter == 0
    assert file_instance.download_count == 0
    assert file_instance.last_accessed_at is not None


@pytest.mark.django_db
def test_file_get_storage_path(user, mock_s3):
    """Test storage path is the content key, not the filename."""
    file_instance = _create(user, content=f'{user.id}/0f0f.pdf')

    assert file_instance.get_storage_path() == f'{user.id}/0f0f.pdf'


@pytest.mark.django_db
def test_filename_unique_across_users(user, other_user, mock_s3):
    """Test two users cannot hold the same filename."""
    _create(user, filename='shared.pdf')

    with pytest.raises(IntegrityError):
        _create(other_user, filename='shared.pdf')


@pytest.mark.django_db
def test_owner_with_files_cannot_be_deleted(user, mock_s3):
    """Test the database refuses to orphan files."""
    _create(user)

    with pytest.raises(ProtectedError):
        user.delete()


@pytest.mark.django_db
def test_file_ordering(user, mock_s3):
    """Test default ordering is upload order."""
    first = _create(user, filename='a.pdf', content=f'{user.id}/a.pdf')
    second = _create(user, filename='b.pdf', content=f'{user.id}/b.pdf')

    assert list(File.objects.all()) == [first, second]
