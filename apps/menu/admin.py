"""
Admin configuration for menu models.
"""

from django.contrib import admin

from .models import MenuItem, Recipe


class RecipeInline(admin.TabularInline):
    model = Recipe
    extra = 0
    fields = ["ingredient", "required_value", "required_unit"]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """Admin interface for MenuItem."""

    list_display = ["name", "category", "price", "shop", "is_available"]
    list_filter = ["is_available", "category", "shop"]
    search_fields = ["name", "category"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [RecipeInline]
