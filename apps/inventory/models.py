"""
Inventory models for shop ingredient stock.

An Ingredient is the ledger entry for one ingredient of a shop. Stock is held
as a number of storage units (quantity) of a fixed size (measurement per
unit), and consumption is accumulated in `used`, expressed in the storage
unit's measurement unit:

    total_measurement = quantity * measurement_per_unit.value
    available = total_measurement - used

`used` is only ever changed by the reservation engine through a transaction,
which keeps 0 <= used <= total_measurement after every commit.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.conf import fulfillment_setting
from apps.core.models import Shop, VersionedModel

from .measurement import Measurement, MeasurementUnit


class Ingredient(VersionedModel):
    """
    Per-ingredient stock record of a shop.
    """

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"

    STOCK_STATUS_CHOICES = [
        (IN_STOCK, "In Stock"),
        (LOW_STOCK, "Low Stock"),
        (OUT_OF_STOCK, "Out of Stock"),
    ]

    EXPIRING_SOON_DAYS = 7

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the ingredient",
    )

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="ingredients",
        help_text="Shop that owns this ingredient",
    )

    name = models.CharField(max_length=255, help_text="Ingredient name (e.g., 'Milk')")

    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Number of storage units in stock (e.g., 10 cartons)",
    )

    unit_value = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Amount contained in one storage unit (e.g., 1000)",
    )

    unit = models.CharField(
        max_length=20,
        choices=MeasurementUnit.choices,
        help_text="Measurement unit of one storage unit (e.g., milliliter)",
    )

    used = models.DecimalField(
        max_digits=20,
        decimal_places=6,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Cumulative amount consumed, in the storage unit's measurement unit",
    )

    min_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Minimum number of storage units before stock counts as low",
    )

    cost_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Cost price per storage unit",
    )

    expiry_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "inventory_ingredients"
        ordering = ["name"]
        verbose_name = "Ingredient"
        verbose_name_plural = "Ingredients"
        unique_together = [["shop", "name"]]
        indexes = [
            models.Index(fields=["shop", "name"], name="ingr_shop_name_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.available_measurement.display_string} available)"

    @property
    def measurement_per_unit(self) -> Measurement:
        return Measurement(self.unit_value, self.unit)

    @property
    def total_measurement(self) -> Decimal:
        return self.quantity * self.unit_value

    @property
    def available(self) -> Decimal:
        return self.total_measurement - self.used

    @property
    def available_measurement(self) -> Measurement:
        return Measurement(self.available, self.unit)

    @property
    def min_measurement(self) -> Measurement:
        return Measurement(self.min_quantity * self.unit_value, self.unit)

    def is_low_stock(self) -> bool:
        return self.total_measurement <= self.min_quantity * self.unit_value

    @property
    def stock_status(self) -> str:
        if self.quantity == 0:
            return self.OUT_OF_STOCK
        if self.is_low_stock():
            return self.LOW_STOCK
        return self.IN_STOCK

    @property
    def stock_percentage(self) -> Decimal:
        """Share of the total stock still available, capped at 100."""
        if self.total_measurement <= 0:
            return Decimal("0")
        return min(Decimal("100"), self.available / self.total_measurement * 100)

    def alert_threshold(self) -> Decimal:
        ratio = Decimal(str(fulfillment_setting("LOW_STOCK_ALERT_RATIO")))
        return self.min_quantity * self.unit_value * ratio

    def needs_alert(self) -> bool:
        """Whether the remaining stock is within the low-stock alert band."""
        return self.available <= self.alert_threshold()

    def can_consume(self, amount: Decimal) -> bool:
        return self.available >= amount

    def is_expired(self) -> bool:
        return self.expiry_date is not None and timezone.localdate() > self.expiry_date

    def is_expiring_soon(self) -> bool:
        if self.expiry_date is None:
            return False
        days_left = (self.expiry_date - timezone.localdate()).days
        return 0 < days_left <= self.EXPIRING_SOON_DAYS

    def calculate_total_cost(self) -> Decimal:
        return self.quantity * self.cost_price

