"""
Serializers for revenue reporting.
"""

from rest_framework import serializers

from .models import RevenueRecord


class RevenueRecordSerializer(serializers.ModelSerializer):
    """Serializer for a daily RevenueRecord."""

    class Meta:
        model = RevenueRecord
        fields = [
            "id",
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
            "updated_at",
        ]
        read_only_fields = fields


class RevenuePeriodSerializer(serializers.Serializer):
    """Validate the date range of a revenue summary request."""

    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, data):
        if data["start"] > data["end"]:
            raise serializers.ValidationError({"end": "End date must not be before start date."})
        return data
