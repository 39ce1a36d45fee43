"""
Order models for the POS.

An Order is written once its stock has been reserved. Its status then tracks
which post-reservation steps have been committed:

    PLACED -> REVENUE_RECORDED -> COMPLETED

Each step advances the status in the same transaction as its own writes, so
an order left behind at an intermediate status can be resumed later without
applying any step twice.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django_fsm import FSMField, transition

from apps.core.models import Shop, VersionedModel
from apps.crm.models import Customer


class Order(VersionedModel):
    """
    A submitted POS order.
    """

    # Payment method choices
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
        (BANK_TRANSFER, "Bank Transfer"),
    ]

    # Status choices for FSM
    PLACED = "PLACED"
    REVENUE_RECORDED = "REVENUE_RECORDED"
    COMPLETED = "COMPLETED"

    STATUS_CHOICES = [
        (PLACED, "Placed"),
        (REVENUE_RECORDED, "Revenue Recorded"),
        (COMPLETED, "Completed"),
    ]

    PENDING_STATUSES = [PLACED, REVENUE_RECORDED]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the order",
    )

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="orders",
        help_text="Shop that took this order",
    )

    terminal_id = models.CharField(
        max_length=64, blank=True, help_text="Terminal that submitted the order"
    )

    customer = models.ForeignKey(
        Customer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        help_text="Customer the order was placed for (optional)",
    )

    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of line prices before discount",
    )

    discount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Discount amount",
    )

    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount paid (subtotal - discount)",
    )

    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES,
        default=CASH,
    )

    status = FSMField(
        default=PLACED,
        choices=STATUS_CHOICES,
        help_text="Post-reservation steps committed so far",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"
        indexes = [
            models.Index(fields=["shop", "-created_at"], name="order_shop_date_idx"),
            models.Index(fields=["status", "updated_at"], name="order_status_idx"),
            models.Index(fields=["customer", "-created_at"], name="order_cust_date_idx"),
        ]

    def __str__(self):
        return f"#{self.short_reference} - {self.total}"

    @property
    def short_reference(self) -> str:
        """Last six characters of the id, upper-cased, as shown to staff."""
        return str(self.id)[-6:].upper()

    @property
    def is_pending(self) -> bool:
        return self.status in self.PENDING_STATUSES

    @transition(field=status, source=PLACED, target=REVENUE_RECORDED)
    def mark_revenue_recorded(self):
        """The order has been added to its day's revenue record."""

    @transition(field=status, source=REVENUE_RECORDED, target=COMPLETED)
    def mark_completed(self):
        """Loyalty points (if any) have been credited."""


class OrderItem(models.Model):
    """
    One line of an order.

    Name and price are copied from the menu item when the order is built, so
    later menu edits do not change past orders.
    """

    HOT = "hot"
    COLD = "cold"

    TEMPERATURE_CHOICES = [
        (HOT, "Hot"),
        (COLD, "Cold"),
    ]

    STAY = "stay"
    TAKE_AWAY = "take_away"

    CONSUMPTION_CHOICES = [
        (STAY, "Stay"),
        (TAKE_AWAY, "Take Away"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the order item",
    )

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Order that this item belongs to",
    )

    menu_item_id = models.CharField(max_length=64, help_text="Menu item that was sold")

    name = models.CharField(max_length=255)

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price at time of sale",
    )

    temperature = models.CharField(max_length=10, choices=TEMPERATURE_CHOICES, default=HOT)

    consumption = models.CharField(max_length=10, choices=CONSUMPTION_CHOICES, default=STAY)

    note = models.CharField(max_length=500, blank=True)

    class Meta:
        db_table = "order_items"
        ordering = ["order", "name"]
        verbose_name = "Order Item"
        verbose_name_plural = "Order Items"
        indexes = [
            models.Index(fields=["menu_item_id"], name="orderitem_menu_idx"),
        ]

    def __str__(self):
        return f"{self.name} x {self.quantity}"

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity
