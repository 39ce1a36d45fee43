"""
Serializers for inventory models.
"""

from rest_framework import serializers

from .models import Ingredient


class IngredientSerializer(serializers.ModelSerializer):
    """Read-only view of a ledger entry with its derived stock figures."""

    total_measurement = serializers.DecimalField(max_digits=24, decimal_places=6, read_only=True)
    available = serializers.DecimalField(max_digits=24, decimal_places=6, read_only=True)
    available_display = serializers.CharField(
        source="available_measurement.display_string", read_only=True
    )
    stock_status = serializers.CharField(read_only=True)
    stock_percentage = serializers.DecimalField(max_digits=7, decimal_places=2, read_only=True)
    needs_alert = serializers.BooleanField(read_only=True)
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = Ingredient
        fields = [
            "id",
            "name",
            "quantity",
            "unit_value",
            "unit",
            "used",
            "min_quantity",
            "cost_price",
            "expiry_date",
            "total_measurement",
            "available",
            "available_display",
            "stock_status",
            "stock_percentage",
            "needs_alert",
            "is_expired",
            "updated_at",
        ]
        read_only_fields = fields
