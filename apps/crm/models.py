"""
Customer models for the loyalty program.

A Customer belongs to one shop and collects points on every order placed in
their name. Points only ever grow through accrual; every accrual is recorded
as a LoyaltyTransaction tied to the order that earned it.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import Shop, VersionedModel


class Customer(VersionedModel):
    """
    Shop customer, usually added on the spot during checkout.
    """

    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"

    GENDER_CHOICES = [
        (MALE, "Male"),
        (FEMALE, "Female"),
        (OTHER, "Other"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the customer",
    )

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="customers",
        help_text="Shop this customer belongs to",
    )

    name = models.CharField(max_length=255, help_text="Customer's name")

    phone_number = models.CharField(max_length=20, blank=True, help_text="Contact phone number")

    gender = models.CharField(max_length=20, choices=GENDER_CHOICES, blank=True)

    point = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Current loyalty point balance",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "crm_customers"
        ordering = ["name"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
        indexes = [
            models.Index(fields=["shop", "phone_number"], name="cust_shop_phone_idx"),
            models.Index(fields=["shop", "name"], name="cust_shop_name_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone_number})" if self.phone_number else self.name


class LoyaltyTransaction(models.Model):
    """
    Points credited to a customer for one order.

    The one-to-one link to the order makes accrual idempotent: a second
    attempt to credit the same order finds the existing row.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the loyalty transaction",
    )

    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name="loyalty_transactions",
        help_text="Customer who earned the points",
    )

    order = models.OneToOneField(
        "sales.Order",
        on_delete=models.CASCADE,
        related_name="loyalty_transaction",
        help_text="Order that generated the points",
    )

    points = models.DecimalField(max_digits=14, decimal_places=4, help_text="Points earned")

    point_rate = models.DecimalField(
        max_digits=5, decimal_places=4, help_text="Rate applied to the order total"
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "crm_loyalty_transactions"
        ordering = ["-created_at"]
        verbose_name = "Loyalty Transaction"
        verbose_name_plural = "Loyalty Transactions"
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="loyalty_cust_date_idx"),
        ]

    def __str__(self):
        return f"{self.customer.name}: +{self.points} points"
