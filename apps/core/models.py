"""
Core models for the shop POS platform.

Every shop-scoped document that takes part in an optimistic transaction
inherits from VersionedModel; the version column is what the transaction
runner compares on commit.
"""

import uuid
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.conf import fulfillment_setting


class VersionedModel(models.Model):
    """
    Abstract base for documents guarded by optimistic concurrency.

    The version is bumped by the transaction runner on every committed
    write. Code outside a transaction should not write these rows directly.
    """

    version = models.PositiveIntegerField(
        default=0,
        help_text="Optimistic concurrency version, incremented on every commit",
    )

    class Meta:
        abstract = True


class Shop(models.Model):
    """
    A shop running one or more POS terminals.

    Ingredients, menu items, customers, orders and revenue records are all
    scoped to a shop.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the shop",
    )

    name = models.CharField(max_length=255, help_text="Shop display name")

    address = models.CharField(max_length=255, blank=True)

    timezone = models.CharField(
        max_length=64,
        default=settings.TIME_ZONE,
        help_text="IANA time zone used to decide the shop's business day",
    )

    point_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        help_text="Loyalty points earned per unit of order total (empty = default rate)",
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shops"
        ordering = ["name"]
        verbose_name = "Shop"
        verbose_name_plural = "Shops"

    def __str__(self):
        return self.name

    @property
    def zone(self):
        return ZoneInfo(self.timezone)

    def effective_point_rate(self):
        """Return the configured point rate, or the platform default when unset."""
        if self.point_rate is None:
            return Decimal(str(fulfillment_setting("DEFAULT_POINT_RATE")))
        return self.point_rate
