"""
Admin configuration for sales models.
"""

from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Inline admin for order items."""

    model = OrderItem
    extra = 0
    fields = ["name", "quantity", "price", "temperature", "consumption", "note"]
    readonly_fields = fields
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for Order model."""

    list_display = [
        "short_reference",
        "shop",
        "terminal_id",
        "customer",
        "total",
        "payment_method",
        "status",
        "created_at",
    ]
    list_filter = ["status", "payment_method", "shop", "created_at"]
    search_fields = ["id", "terminal_id", "customer__name", "customer__phone_number"]
    readonly_fields = [
        "id",
        "shop",
        "customer",
        "subtotal",
        "discount",
        "total",
        "status",
        "version",
        "created_at",
        "updated_at",
    ]
    inlines = [OrderItemInline]
    date_hierarchy = "created_at"
