"""Django admin configuration for files app."""

from typing import override

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.logic.cascade import (
    delete_file_cascade,
    delete_files_cascade,
)
from server.apps.files.models import File, FileStatus


def format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    return f'{size_bytes / (1024 * 1024):.1f} MB'


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model.

    Deletion goes through the cascade coordinator so the owner's file
    list is updated in the same transaction.
    """

    list_display = [
        'filename',
        'owner',
        'size_display',
        'content_type',
        'status',
        'download_count',
        'uploaded_at',
    ]

    list_filter = [
        'content_type',
        'status',
        'uploaded_at',
    ]

    actions = ['mark_inactive', 'mark_active']

    search_fields = [
        'filename',
        'owner__username',
        'checksum_sha256',
    ]

    readonly_fields = [
        'owner',
        'content',
        'size_bytes',
        'content_type',
        'checksum_sha256',
        'name_counter',
        'download_count',
        'uploaded_at',
        'last_accessed_at',
        'modified_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('filename', 'owner', 'content', 'status'),
        }),
        ('Metadata', {
            'fields': (
                'size_bytes',
                'content_type',
                'checksum_sha256',
                'name_counter',
                'download_count',
            ),
        }),
        ('Timestamps', {
            'fields': ('uploaded_at', 'last_accessed_at', 'modified_at'),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format."""
        return format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    @admin.action(description='Deactivate selected files')
    def mark_inactive(self, request: HttpRequest, queryset: QuerySet[File]) -> None:
        updated = queryset.update(status=FileStatus.INACTIVE)
        self.message_user(request, f'{updated} files deactivated')

    @admin.action(description='Activate selected files')
    def mark_active(self, request: HttpRequest, queryset: QuerySet[File]) -> None:
        updated = queryset.update(status=FileStatus.ACTIVE)
        self.message_user(request, f'{updated} files activated')

    @override
    def has_add_permission(self, request: HttpRequest) -> bool:
        # Files only enter the system through upload
        return False

    @override
    def delete_model(self, request: HttpRequest, obj: File) -> None:
        delete_file_cascade(obj)

    @override
    def delete_queryset(
        self,
        request: HttpRequest,
        queryset: QuerySet[File],
    ) -> None:
        delete_files_cascade(queryset)

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('owner')
