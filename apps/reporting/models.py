"""
Daily revenue aggregates.

There is at most one RevenueRecord per shop and calendar day (in the shop's
time zone). Map fields are stored as JSON objects with string keys; money
values inside them are decimal strings so no precision is lost.
"""

import uuid
from decimal import Decimal

from django.db import models

from apps.core.models import Shop, VersionedModel


class RevenueRecord(VersionedModel):
    """
    Revenue, order and customer statistics of one shop for one day.

    Invariant: average_order_value == revenue / total_orders whenever
    total_orders > 0.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the revenue record",
    )

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="revenue_records",
    )

    date = models.DateField(help_text="Business day in the shop's time zone")

    revenue = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    total_orders = models.PositiveIntegerField(default=0)

    average_order_value = models.DecimalField(
        max_digits=20, decimal_places=6, default=Decimal("0")
    )

    top_selling_items = models.JSONField(
        default=dict, blank=True, help_text="Menu item id -> quantity sold"
    )

    peak_hours = models.JSONField(default=dict, blank=True, help_text="Hour (0-23) -> revenue")

    day_of_week_revenue = models.JSONField(
        default=dict, blank=True, help_text="Weekday (0 = Sunday) -> revenue"
    )

    new_customers = models.PositiveIntegerField(default=0)
    returning_customers = models.PositiveIntegerField(default=0)
    total_customers = models.PositiveIntegerField(default=0)

    payment_methods = models.JSONField(
        default=dict, blank=True, help_text="Payment method -> number of orders"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "revenue_records"
        ordering = ["-date"]
        verbose_name = "Revenue Record"
        verbose_name_plural = "Revenue Records"
        constraints = [
            models.UniqueConstraint(fields=["shop", "date"], name="revenue_shop_date_uniq"),
        ]

    def __str__(self):
        return f"{self.shop} {self.date}: {self.revenue} ({self.total_orders} orders)"
