"""
Admin configuration for reporting models.
"""

from django.contrib import admin

from .models import RevenueRecord


@admin.register(RevenueRecord)
class RevenueRecordAdmin(admin.ModelAdmin):
    """Admin interface for RevenueRecord."""

    list_display = ["date", "shop", "revenue", "total_orders", "average_order_value"]
    list_filter = ["shop", "date"]
    date_hierarchy = "date"
    readonly_fields = [
        "id",
        "shop",
        "date",
        "revenue",
        "total_orders",
        "average_order_value",
        "top_selling_items",
        "peak_hours",
        "day_of_week_revenue",
        "new_customers",
        "returning_customers",
        "total_customers",
        "payment_methods",
        "version",
        "created_at",
        "updated_at",
    ]
