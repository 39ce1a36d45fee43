from django.contrib import admin

from .models import Customer, LoyaltyTransaction


class LoyaltyTransactionInline(admin.TabularInline):
    model = LoyaltyTransaction
    extra = 0
    fields = ["order", "points", "point_rate", "created_at"]
    readonly_fields = fields
    can_delete = False


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer model."""

    list_display = ["name", "phone_number", "gender", "point", "shop", "created_at"]

    list_filter = ["gender", "shop", "created_at"]

    search_fields = ["name", "phone_number"]

    # Points change only through accrual
    readonly_fields = ["id", "point", "version", "created_at", "updated_at"]

    inlines = [LoyaltyTransactionInline]


@admin.register(LoyaltyTransaction)
class LoyaltyTransactionAdmin(admin.ModelAdmin):
    """Admin interface for LoyaltyTransaction model."""

    list_display = ["customer", "order", "points", "point_rate", "created_at"]

    list_filter = ["created_at"]

    search_fields = ["customer__name", "customer__phone_number"]

    readonly_fields = ["id", "customer", "order", "points", "point_rate", "created_at"]
