"""Tests for file list maintenance and reconciliation."""

import pytest

from server.apps.files.logic.ownership import (
    append_file,
    clear_file_lists,
    reconcile_file_list,
    remove_file,
)
from server.apps.files.models import File


def _create(owner, filename):
    return File.objects.create(
        owner=owner,
        filename=filename,
        content=f'{owner.id}/{filename}',
        size_bytes=1,
        content_type='application/pdf',
    )


@pytest.mark.django_db
def test_append_file(user):
    """Test ids are appended once, in order."""
    append_file(user.id, 3)
    append_file(user.id, 1)
    append_file(user.id, 3)

    user.refresh_from_db()
    assert user.file_ids == [3, 1]


@pytest.mark.django_db
def test_remove_file(user):
    """Test removal is idempotent."""
    user.file_ids = [1, 2, 3]
    user.save(update_fields=['file_ids'])

    assert remove_file(user.id, 2) is True
    assert remove_file(user.id, 2) is False

    user.refresh_from_db()
    assert user.file_ids == [1, 3]


@pytest.mark.django_db
def test_remove_file_missing_owner():
    """Test removing from a deleted user's list is a no-op."""
    assert remove_file(99999, 1) is False


@pytest.mark.django_db
def test_clear_file_lists_selected(user, other_user):
    """Test only the given users are cleared."""
    user.file_ids = [1]
    user.save(update_fields=['file_ids'])
    other_user.file_ids = [2]
    other_user.save(update_fields=['file_ids'])

    assert clear_file_lists([user.id]) == 1

    user.refresh_from_db()
    other_user.refresh_from_db()
    assert user.file_ids == []
    assert other_user.file_ids == [2]


@pytest.mark.django_db
def test_clear_file_lists_all(user, other_user):
    """Test None clears everyone."""
    assert clear_file_lists() == 2


@pytest.mark.django_db
def test_reconcile_in_sync(user, mock_s3):
    """Test a correct list is left alone."""
    first = _create(user, 'a.pdf')
    user.file_ids = [first.id]
    user.save(update_fields=['file_ids'])

    assert reconcile_file_list(user.id) is False


@pytest.mark.django_db
def test_reconcile_repairs_drift(user, mock_s3):
    """Test stale and duplicate ids go, missing ids are appended."""
    first = _create(user, 'a.pdf')
    second = _create(user, 'b.pdf')
    third = _create(user, 'c.pdf')
    user.file_ids = [third.id, 99999, third.id, first.id]
    user.save(update_fields=['file_ids'])

    assert reconcile_file_list(user.id) is True

    user.refresh_from_db()
    assert user.file_ids == [third.id, first.id, second.id]


@pytest.mark.django_db
def test_reconcile_missing_user():
    """Test reconciling an unknown user."""
    assert reconcile_file_list(99999) is False
