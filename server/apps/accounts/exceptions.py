"""Exceptions for accounts app.

Authentication errors mean the caller has no usable session.
Authorization errors mean the session is valid but its user lacks the
role or ownership an operation requires. Both are reported as HTTP 401.
"""


class AuthenticationError(Exception):
    """Raised when the caller is not (or cannot be) authenticated."""


class InvalidCredentialsError(AuthenticationError):
    """Raised when username or password does not verify."""

    def __init__(self) -> None:
        """Initialize InvalidCredentialsError with a generic message."""
        super().__init__('Invalid username or password')


class AlreadyAuthenticatedError(AuthenticationError):
    """Raised when a login is attempted from a valid session."""

    def __init__(self, username: str) -> None:
        """Initialize AlreadyAuthenticatedError.

        Args:
            username: Username bound to the current session.
        """
        self.username = username
        super().__init__(f'{username} is already logged in')


class NotAuthenticatedError(AuthenticationError):
    """Raised when an operation needs a session and none is valid."""

    def __init__(self, message: str = 'You must be logged in') -> None:
        """Initialize NotAuthenticatedError.

        Args:
            message: Human readable reason.
        """
        super().__init__(message)


class AuthorizationError(Exception):
    """Raised when a valid session lacks the required permission."""


class NotAuthorizedError(AuthorizationError):
    """Raised when the authorizer denies an operation."""

    def __init__(self, message: str = 'Not authorized') -> None:
        """Initialize NotAuthorizedError.

        Args:
            message: Human readable reason.
        """
        super().__init__(message)


class ConflictError(Exception):
    """Raised when a unique name stays taken after conflict handling."""


class StoreError(Exception):
    """Raised when an underlying store fails; its text is never shown."""
