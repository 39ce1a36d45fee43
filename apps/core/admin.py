"""
Django admin configuration for core models.
"""

from django.contrib import admin

from .models import Shop


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    """Admin interface for Shop."""

    list_display = ["name", "timezone", "point_rate", "is_active", "created_at"]
    list_filter = ["is_active", "timezone"]
    search_fields = ["name", "address"]
    readonly_fields = ["id", "created_at", "updated_at"]
