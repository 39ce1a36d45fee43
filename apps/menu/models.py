"""
Menu models: sellable items and the ingredients each one consumes.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import Shop
from apps.inventory.measurement import Measurement, MeasurementUnit
from apps.inventory.models import Ingredient


class MenuItem(models.Model):
    """
    A product on a shop's menu (e.g., 'Iced Latte').
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the menu item",
    )

    shop = models.ForeignKey(
        Shop,
        on_delete=models.CASCADE,
        related_name="menu_items",
        help_text="Shop that sells this item",
    )

    name = models.CharField(max_length=255)

    category = models.CharField(max_length=100, blank=True, help_text="e.g., Coffee, Tea, Cake")

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Selling price",
    )

    is_available = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "menu_items"
        ordering = ["category", "name"]
        verbose_name = "Menu Item"
        verbose_name_plural = "Menu Items"
        indexes = [
            models.Index(fields=["shop", "category"], name="menu_shop_category_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.price})"


class Recipe(models.Model):
    """
    Amount of one ingredient consumed per unit of a menu item.

    The required amount may be in any unit compatible with the ingredient's
    storage unit (e.g., a recipe in liters for an ingredient stocked in
    milliliters).
    """

    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.CASCADE,
        related_name="recipes",
    )

    ingredient = models.ForeignKey(
        Ingredient,
        on_delete=models.PROTECT,
        related_name="recipes",
    )

    ingredient_name = models.CharField(
        max_length=255,
        help_text="Snapshot of the ingredient name for display and logs",
    )

    required_value = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0"))],
    )

    required_unit = models.CharField(max_length=20, choices=MeasurementUnit.choices)

    class Meta:
        db_table = "menu_recipes"
        ordering = ["menu_item", "ingredient_name"]
        verbose_name = "Recipe"
        verbose_name_plural = "Recipes"

    def __str__(self):
        return f"{self.menu_item.name}: {self.required_amount} {self.ingredient_name}"

    def save(self, *args, **kwargs):
        if not self.ingredient_name:
            self.ingredient_name = self.ingredient.name
        super().save(*args, **kwargs)

    @property
    def required_amount(self) -> Measurement:
        return Measurement(self.required_value, self.required_unit)
