"""Django admin configuration for accounts app."""

from typing import Any, override

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.accounts.models import Session, User
from server.apps.files.logic.cascade import delete_user_cascade

_USER_AGENT_DISPLAY_LENGTH = 50


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """Admin interface for User model.

    Deleting users here runs the same cascade as the API: files first,
    then sessions, then the account.
    """

    list_display = [
        'username',
        'email',
        'role',
        'file_count',
        'is_active',
        'date_joined',
    ]

    list_filter = [
        'role',
        'is_active',
        'date_joined',
    ]

    fieldsets = (
        *DjangoUserAdmin.fieldsets,
        ('Files Manager', {
            'fields': ('role', 'file_ids'),
        }),
    )

    # Staff status follows the role
    readonly_fields = ['file_ids', 'is_staff']

    def file_count(self, obj: User) -> int:
        """Number of ids on the user's file list."""
        return len(obj.file_ids)
    file_count.short_description = 'Files'  # type: ignore[attr-defined]

    @override
    def delete_model(self, request: HttpRequest, obj: Any) -> None:
        delete_user_cascade(obj.pk)

    @override
    def delete_queryset(self, request: HttpRequest, queryset: QuerySet[Any]) -> None:
        for user_id in queryset.values_list('pk', flat=True):
            delete_user_cascade(user_id)


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin[Session]):
    """Admin interface for Session model."""

    list_display = [
        'session_key_short',
        'user',
        'ip_address',
        'user_agent_short',
        'created_at',
        'expires_at',
    ]

    list_filter = [
        'created_at',
        'expires_at',
    ]

    search_fields = [
        'user__username',
        'ip_address',
        'user_agent',
    ]

    readonly_fields = [
        'session_key',
        'user',
        'cookie_path',
        'original_max_age',
        'http_only',
        'secure',
        'same_site',
        'ip_address',
        'user_agent',
        'expires_at',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('Session Information', {
            'fields': ('session_key', 'user', 'ip_address', 'user_agent'),
        }),
        ('Cookie', {
            'fields': (
                'cookie_path',
                'original_max_age',
                'http_only',
                'secure',
                'same_site',
            ),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'expires_at'),
        }),
    )

    def session_key_short(self, obj: Session) -> str:
        """Display truncated session key.

        Args:
            obj: Session instance.

        Returns:
            First 8 characters of the key.
        """
        return obj.session_key[:8]
    session_key_short.short_description = 'Session key'  # type: ignore[attr-defined]

    def user_agent_short(self, obj: Session) -> str:
        if not obj.user_agent:
            return '-'
        if len(obj.user_agent) > _USER_AGENT_DISPLAY_LENGTH:
            return f'{obj.user_agent[:_USER_AGENT_DISPLAY_LENGTH]}...'
        return obj.user_agent
    user_agent_short.short_description = 'User agent'  # type: ignore[attr-defined]

    @override
    def has_add_permission(self, request: HttpRequest) -> bool:
        # Sessions are only created by logging in
        return False

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[Session]:
        return super().get_queryset(request).select_related('user')
