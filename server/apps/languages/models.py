"""Database models for languages app."""

from typing import ClassVar, Final, final, override

from django.db import models

_NAME_MAX_LENGTH: Final = 64
_DISPLAY_NAME_MAX_LENGTH: Final = 128
_CREATED_BY_MAX_LENGTH: Final = 150  # matches AbstractUser.username


@final
class Language(models.Model):
    """Language supported by the interface.

    ``created_by`` keeps the creator's username as plain text, so the
    record survives the creator's account.
    """

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        unique=True,
        help_text='Short code, e.g. "en" or "pl"',
    )
    display_name = models.CharField(max_length=_DISPLAY_NAME_MAX_LENGTH)
    translations = models.JSONField(
        default=dict,
        blank=True,
        help_text='Optional map of message keys to translated text',
    )
    created_by = models.CharField(
        max_length=_CREATED_BY_MAX_LENGTH,
        blank=True,
        default='',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Language'  # type: ignore[mutable-override]
        verbose_name_plural = 'Languages'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['name']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.display_name} ({self.name})'
