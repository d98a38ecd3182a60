"""
Django admin configuration for core models.
"""

from django.contrib import admin

from .models import IdentifierSequence


@admin.register(IdentifierSequence)
class IdentifierSequenceAdmin(admin.ModelAdmin):
    """Read-only view of identifier counters; values must never be edited."""

    list_display = ["key", "counter", "updated_at"]
    search_fields = ["key"]
    readonly_fields = ["key", "counter", "updated_at"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
