"""
Serializers for customers.
"""

from rest_framework import serializers

from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Serializer for Customer model."""

    class Meta:
        model = Customer
        fields = ["id", "name", "phone_number", "gender", "point", "created_at"]
        read_only_fields = ["id", "point", "created_at"]


class CustomerQuickAddSerializer(serializers.Serializer):
    """Payload for adding a customer during checkout."""

    name = serializers.CharField(max_length=255)
    phone_number = serializers.CharField(max_length=20)
    gender = serializers.ChoiceField(
        choices=Customer.GENDER_CHOICES, required=False, allow_blank=True, default=""
    )
