"""
Admin configuration for inventory models.
"""

from django.contrib import admin

from .models import Ingredient


@admin.register(Ingredient)
class IngredientAdmin(admin.ModelAdmin):
    """Admin interface for Ingredient."""

    list_display = [
        "name",
        "shop",
        "quantity",
        "unit_value",
        "unit",
        "used",
        "min_quantity",
        "stock_status",
    ]
    list_filter = ["unit", "shop", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["id", "version", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "shop", "name", "expiry_date"),
            },
        ),
        (
            "Stock",
            {
                "fields": ("quantity", "unit_value", "unit", "used", "min_quantity", "cost_price"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("version", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
