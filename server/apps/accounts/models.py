"""Database models for accounts app."""

from datetime import datetime
from typing import Any, ClassVar, Final, final, override

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import UserManager as DjangoUserManager
from django.db import models
from django.utils import timezone

# Constants for field max lengths
_ROLE_MAX_LENGTH: Final = 16
_SESSION_KEY_MAX_LENGTH: Final = 64
_USER_AGENT_MAX_LENGTH: Final = 255
_COOKIE_PATH_MAX_LENGTH: Final = 255
_SAME_SITE_MAX_LENGTH: Final = 16


class Role(models.TextChoices):
    """Roles known to the authorizer."""

    USER = 'user', 'User'
    ADMIN = 'admin', 'Admin'


class UserManager(DjangoUserManager):
    """User manager that gives superusers the admin role."""

    @override
    def create_superuser(
        self,
        username: str,
        email: str | None = None,
        password: str | None = None,
        **extra_fields: Any,
    ) -> 'User':
        """Create a superuser with the admin role.

        Args:
            username: Unique username.
            email: Unique email address.
            password: Raw password, hashed before saving.
            **extra_fields: Additional model fields.

        Returns:
            Created User instance.
        """
        extra_fields.setdefault('role', Role.ADMIN)
        return super().create_superuser(
            username,
            email,
            password,
            **extra_fields,
        )


class User(AbstractUser):
    """Account that owns files and sessions.

    Username and email are both globally unique. ``file_ids`` is the
    ordered, enumerable view of the files this user owns; the ``owner``
    column of each File is the source of truth and the list is repaired
    by reconciliation when the two drift apart.
    """

    email = models.EmailField(
        'email address',
        unique=True,
    )

    role = models.CharField(
        max_length=_ROLE_MAX_LENGTH,
        choices=Role.choices,
        default=Role.USER,
    )

    file_ids = models.JSONField(
        default=list,
        blank=True,
        help_text='Ordered ids of files owned by this user',
    )

    objects: ClassVar[UserManager] = UserManager()  # type: ignore[assignment]

    @property
    def is_admin(self) -> bool:
        """Whether the user holds the admin role."""
        return self.role == Role.ADMIN

    @override
    def save(self, *args: Any, **kwargs: Any) -> None:
        """Save the user with Django admin access following the role.

        ``is_staff`` always equals the admin role, so promoting a user
        opens the admin site and demoting one closes it.
        """
        self.is_staff = self.is_admin
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'role' in update_fields:
            kwargs['update_fields'] = {*update_fields, 'is_staff'}
        super().save(*args, **kwargs)


@final
class Session(models.Model):
    """Authenticated session created by a successful login.

    The session key travels in a cookie; the cookie attributes are
    copied here so the session can be listed and audited. A session is
    valid only until ``expires_at``.
    """

    session_key = models.CharField(
        max_length=_SESSION_KEY_MAX_LENGTH,
        unique=True,
        help_text='Unique session identifier',
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='sessions',
        db_index=True,
    )

    # Cookie metadata copied from the transport layer
    cookie_path = models.CharField(
        max_length=_COOKIE_PATH_MAX_LENGTH,
        default='/',
    )
    original_max_age = models.PositiveIntegerField(
        help_text='Cookie max age in seconds at creation time',
    )
    http_only = models.BooleanField(default=True)
    secure = models.BooleanField(default=False)
    same_site = models.CharField(
        max_length=_SAME_SITE_MAX_LENGTH,
        default='Lax',
    )

    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text='Client IP address',
    )

    user_agent = models.CharField(
        max_length=_USER_AGENT_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Client user agent string',
    )

    expires_at = models.DateTimeField(db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Session'  # type: ignore[mutable-override]
        verbose_name_plural = 'Sessions'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['user', '-created_at'],
                name='accounts_user_session_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username} ({self.session_key[:8]})'

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the session is past its expiry time.

        Args:
            now: Reference time, defaults to the current time.

        Returns:
            True if the session has expired.
        """
        return self.expires_at <= (now or timezone.now())
