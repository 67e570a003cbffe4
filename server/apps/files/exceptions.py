"""Exceptions for files app."""

from collections.abc import Iterable

from django.core.exceptions import ValidationError

from server.apps.accounts.exceptions import ConflictError, StoreError


class UnsupportedContentTypeError(ValidationError):
    """Raised when an upload has a content type outside the allowed set."""

    def __init__(self, content_type: str, allowed: Iterable[str]) -> None:
        """Initialize UnsupportedContentTypeError.

        Args:
            content_type: Rejected content type.
            allowed: Content types that are accepted.
        """
        self.content_type = content_type
        self.allowed = sorted(allowed)
        super().__init__(
            f'Invalid file type {content_type}, '
            f'allowed: {", ".join(self.allowed)}',
            code='unsupported_content_type',
        )


class FileTooLargeError(ValidationError):
    """Raised when an upload exceeds the configured size ceiling."""

    def __init__(self, size_bytes: int, max_bytes: int) -> None:
        """Initialize FileTooLargeError.

        Args:
            size_bytes: Size of the rejected upload.
            max_bytes: Configured ceiling in bytes.
        """
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f'File size limit exceeded: {size_bytes} bytes '
            f'(max: {max_bytes} bytes)',
            code='file_too_large',
        )


class NameConflictError(ConflictError):
    """Raised when a filename is taken and cannot be used."""

    def __init__(self, filename: str) -> None:
        """Initialize NameConflictError.

        Args:
            filename: The name that is already taken.
        """
        self.filename = filename
        super().__init__(f'Filename already exists: {filename}')


class StorageError(StoreError):
    """Raised when reading or writing file content in storage fails."""

    def __init__(self, name: str, operation: str) -> None:
        """Initialize StorageError.

        Args:
            name: Storage key involved.
            operation: What was attempted, e.g. 'upload'.
        """
        self.name = name
        self.operation = operation
        super().__init__(f'Storage {operation} failed: {name}')
