"""
Tests for the ingredient ledger and low-stock alerts.
"""

from decimal import Decimal

import pytest

from apps.inventory.alerts import IngredientAlert
from apps.inventory.measurement import MeasurementUnit
from apps.inventory.models import Ingredient


@pytest.mark.django_db
class TestIngredient:
    """Test the derived stock values of an Ingredient."""

    def test_available_amount(self, milk):
        assert milk.total_measurement == Decimal("10000")
        assert milk.available == Decimal("500")
        assert milk.available_measurement.display_string == "500 ml"
        assert milk.measurement_per_unit.unit == MeasurementUnit.MILLILITER

    def test_alert_threshold_uses_ratio(self, milk):
        assert milk.alert_threshold() == Decimal("1200")
        assert milk.needs_alert()

    def test_no_alert_with_plenty_of_stock(self, coffee_beans):
        assert coffee_beans.available == Decimal("5000")
        assert not coffee_beans.needs_alert()

    def test_alert_ratio_is_configurable(self, milk, settings):
        settings.POS_FULFILLMENT = {**settings.POS_FULFILLMENT, "LOW_STOCK_ALERT_RATIO": "0.4"}
        assert milk.alert_threshold() == Decimal("400")
        assert not milk.needs_alert()

    def test_stock_status(self, shop):
        ingredient = Ingredient(
            shop=shop, name="Sugar", quantity=Decimal("0"), unit_value=1000, unit="gram"
        )
        assert ingredient.stock_status == Ingredient.OUT_OF_STOCK

        ingredient.quantity = Decimal("2")
        ingredient.min_quantity = Decimal("2")
        assert ingredient.stock_status == Ingredient.LOW_STOCK

        ingredient.quantity = Decimal("3")
        assert ingredient.stock_status == Ingredient.IN_STOCK

    def test_stock_percentage(self, milk):
        assert milk.stock_percentage == Decimal("5")

    def test_can_consume(self, milk):
        assert milk.can_consume(Decimal("500"))
        assert not milk.can_consume(Decimal("500.001"))


@pytest.mark.django_db
class TestIngredientAlert:
    """Test IngredientAlert built from a ledger entry."""

    def test_alert_values(self, milk):
        milk.used = Decimal("9900")
        alert = IngredientAlert.for_ingredient(milk)

        assert alert.ingredient_id == str(milk.pk)
        assert alert.ingredient_name == "Milk"
        assert alert.current_available.value == Decimal("100")
        assert alert.min_quantity.value == Decimal("1000")
        assert alert.percentage == Decimal("10.0")
        assert alert.is_urgent
        assert "Milk is running low" in alert.message

    def test_alert_without_minimum(self, milk):
        milk.min_quantity = Decimal("0")
        alert = IngredientAlert.for_ingredient(milk)
        assert alert.percentage == Decimal("0.0")

    def test_to_dict(self, milk):
        data = IngredientAlert.for_ingredient(milk).to_dict()
        assert data["ingredient_name"] == "Milk"
        assert Decimal(data["current_available"]["value"]) == Decimal("500")
        assert data["current_available"]["unit"] == "milliliter"
        assert data["percentage"] == "50.0"
