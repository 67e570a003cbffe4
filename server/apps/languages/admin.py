"""Django admin configuration for languages app."""

from django.contrib import admin

from server.apps.languages.models import Language


@admin.register(Language)
class LanguageAdmin(admin.ModelAdmin[Language]):
    """Admin interface for Language model."""

    list_display = [
        'name',
        'display_name',
        'created_by',
        'created_at',
    ]

    search_fields = [
        'name',
        'display_name',
    ]

    readonly_fields = ['created_by', 'created_at']
