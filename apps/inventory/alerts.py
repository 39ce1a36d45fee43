"""
Low-stock alerts produced after a successful reservation.

Alerts are plain values handed back to the caller for display; they are not
stored.
"""

from dataclasses import dataclass
from decimal import Decimal

from .measurement import Measurement

URGENT_PERCENTAGE = Decimal("120")


@dataclass(frozen=True)
class IngredientAlert:
    ingredient_id: str
    ingredient_name: str
    current_available: Measurement
    min_quantity: Measurement
    percentage: Decimal

    @classmethod
    def for_ingredient(cls, ingredient):
        """
        Build an alert from a committed ledger entry.

        The percentage is the available amount relative to the minimum stock
        amount (min_quantity storage units).
        """
        minimum = ingredient.min_measurement
        if minimum.value > 0:
            percentage = ingredient.available_measurement.value / minimum.value * 100
        else:
            percentage = Decimal("0")
        return cls(
            ingredient_id=str(ingredient.pk),
            ingredient_name=ingredient.name,
            current_available=ingredient.available_measurement,
            min_quantity=minimum,
            percentage=percentage.quantize(Decimal("0.1")),
        )

    @property
    def is_urgent(self) -> bool:
        return self.percentage <= URGENT_PERCENTAGE

    @property
    def message(self) -> str:
        return (
            f"{self.ingredient_name} is running low "
            f"({self.current_available.display_string} left, {self.percentage}% of minimum)"
        )

    def to_dict(self) -> dict:
        return {
            "ingredient_id": self.ingredient_id,
            "ingredient_name": self.ingredient_name,
            "current_available": self.current_available.to_dict(),
            "min_quantity": self.min_quantity.to_dict(),
            "percentage": str(self.percentage),
            "message": self.message,
        }
