"""Response payloads for files.

Administrative listings show other users' files. For those rows the
storage key is replaced by a fixed placeholder; only the owner sees
where their content is stored.
"""

from typing import Any, Final

from server.apps.files.models import File

REDACTED: Final = '[redacted]'


def present_file(file_instance: File, viewer_id: int) -> dict[str, Any]:
    """Serialize a file for a given viewer.

    Args:
        file_instance: File to serialize.
        viewer_id: ID of the user the response is for.

    Returns:
        JSON-compatible dictionary.
    """
    is_owner = file_instance.owner_id == viewer_id
    return {
        'id': file_instance.id,
        'filename': file_instance.filename,
        'content_type': file_instance.content_type,
        'size': file_instance.size_bytes,
        'status': file_instance.status,
        'owner': file_instance.owner_id,
        'storage_path': (
            file_instance.get_storage_path() if is_owner else REDACTED
        ),
        'download_count': file_instance.download_count,
        'uploaded_at': file_instance.uploaded_at.isoformat(),
        'last_accessed_at': file_instance.last_accessed_at.isoformat(),
        'modified_at': file_instance.modified_at.isoformat(),
    }
