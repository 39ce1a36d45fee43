"""
Unit-aware measurement value type for ingredient amounts.

Units convert only within the same physical quantity: gram and kilogram are
mass, milliliter and liter are volume, piece is a count. Every arithmetic and
comparison operation converts the right operand into the left operand's unit
first; incompatible operands give None (arithmetic) or False (comparison).
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.db import models

MASS = "mass"
VOLUME = "volume"
COUNT = "count"


class MeasurementUnit(models.TextChoices):
    GRAM = "gram", "Gram"
    KILOGRAM = "kilogram", "Kilogram"
    MILLILITER = "milliliter", "Milliliter"
    LITER = "liter", "Liter"
    PIECE = "piece", "Piece"

    @property
    def quantity_kind(self):
        return _QUANTITY_KINDS[self]

    @property
    def short_name(self):
        return _SHORT_NAMES[self]

    def is_compatible_with(self, other):
        return self.quantity_kind == MeasurementUnit(other).quantity_kind


_QUANTITY_KINDS = {
    MeasurementUnit.GRAM: MASS,
    MeasurementUnit.KILOGRAM: MASS,
    MeasurementUnit.MILLILITER: VOLUME,
    MeasurementUnit.LITER: VOLUME,
    MeasurementUnit.PIECE: COUNT,
}

_SHORT_NAMES = {
    MeasurementUnit.GRAM: "g",
    MeasurementUnit.KILOGRAM: "kg",
    MeasurementUnit.MILLILITER: "ml",
    MeasurementUnit.LITER: "l",
    MeasurementUnit.PIECE: "pcs",
}

# Factor to multiply a value in the first unit by to express it in the second.
_FACTORS = {
    (MeasurementUnit.GRAM, MeasurementUnit.KILOGRAM): Decimal("0.001"),
    (MeasurementUnit.KILOGRAM, MeasurementUnit.GRAM): Decimal("1000"),
    (MeasurementUnit.MILLILITER, MeasurementUnit.LITER): Decimal("0.001"),
    (MeasurementUnit.LITER, MeasurementUnit.MILLILITER): Decimal("1000"),
}

EQUALITY_TOLERANCE = Decimal("0.001")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def conversion_factor(source, target) -> Optional[Decimal]:
    """Return the factor from source to target unit, or None if incompatible."""
    source, target = MeasurementUnit(source), MeasurementUnit(target)
    if source == target:
        return Decimal("1")
    return _FACTORS.get((source, target))


@dataclass(frozen=True)
class Measurement:
    """
    A non-negative amount in a unit.

    Negative values are clamped to zero on construction.

    Example:
        >>> Measurement(1000, "gram").converted(MeasurementUnit.KILOGRAM)
        Measurement(value=Decimal('1.000'), unit=<MeasurementUnit.KILOGRAM: 'kilogram'>)
    """

    value: Decimal
    unit: MeasurementUnit

    def __post_init__(self):
        value = to_decimal(self.value)
        object.__setattr__(self, "value", max(Decimal("0"), value))
        object.__setattr__(self, "unit", MeasurementUnit(self.unit))

    # Conversion

    def converted(self, to) -> Optional["Measurement"]:
        factor = conversion_factor(self.unit, to)
        if factor is None:
            return None
        return Measurement(self.value * factor, to)

    # Arithmetic

    def multiplied(self, by) -> "Measurement":
        return Measurement(self.value * to_decimal(by), self.unit)

    def adding(self, other: "Measurement") -> Optional["Measurement"]:
        other_converted = other.converted(self.unit)
        if other_converted is None:
            return None
        return Measurement(self.value + other_converted.value, self.unit)

    def subtracting(self, other: "Measurement") -> Optional["Measurement"]:
        """Subtract other, flooring the result at zero."""
        other_converted = other.converted(self.unit)
        if other_converted is None:
            return None
        return Measurement(self.value - other_converted.value, self.unit)

    # Comparison

    def is_greater_than(self, other: "Measurement") -> bool:
        other_converted = other.converted(self.unit)
        if other_converted is None:
            return False
        return self.value > other_converted.value

    def is_less_than(self, other: "Measurement") -> bool:
        other_converted = other.converted(self.unit)
        if other_converted is None:
            return False
        return self.value < other_converted.value

    def is_equal_to(self, other: "Measurement") -> bool:
        other_converted = other.converted(self.unit)
        if other_converted is None:
            return False
        return abs(self.value - other_converted.value) < EQUALITY_TOLERANCE

    def __add__(self, other):
        return self.adding(other)

    def __sub__(self, other):
        return self.subtracting(other)

    def __mul__(self, scalar):
        return self.multiplied(scalar)

    __rmul__ = __mul__

    def __gt__(self, other):
        return self.is_greater_than(other)

    def __lt__(self, other):
        return self.is_less_than(other)

    def __ge__(self, other):
        return self.is_greater_than(other) or self.is_equal_to(other)

    def __le__(self, other):
        return self.is_less_than(other) or self.is_equal_to(other)

    # Helpers

    def is_zero(self) -> bool:
        return self.value == 0

    def rounded(self, places: int = 2) -> "Measurement":
        quantum = Decimal(1).scaleb(-places)
        return Measurement(self.value.quantize(quantum, rounding=ROUND_HALF_UP), self.unit)

    @property
    def formatted_value(self) -> str:
        text = f"{self.rounded(2).value:f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    @property
    def display_string(self) -> str:
        return f"{self.formatted_value} {self.unit.short_name}"

    def __str__(self):
        return self.display_string

    def to_dict(self) -> dict:
        return {"value": str(self.value), "unit": self.unit.value}

    @classmethod
    def from_dict(cls, data) -> Optional["Measurement"]:
        """Build a measurement from its dict form, or None if the data is invalid."""
        try:
            return cls(data["value"], MeasurementUnit(data["unit"]))
        except (KeyError, TypeError, ValueError, ArithmeticError):
            return None
