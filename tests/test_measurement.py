"""
Tests for the unit-aware Measurement value type.
"""

from decimal import Decimal

import pytest

from apps.inventory.measurement import Measurement, MeasurementUnit, conversion_factor


class TestConversion:
    """Conversion between units of the same physical quantity."""

    def test_kilogram_to_gram(self):
        converted = Measurement(Decimal("1.5"), MeasurementUnit.KILOGRAM).converted(
            MeasurementUnit.GRAM
        )
        assert converted.value == Decimal("1500")
        assert converted.unit == MeasurementUnit.GRAM

    def test_milliliter_to_liter(self):
        converted = Measurement(250, "milliliter").converted(MeasurementUnit.LITER)
        assert converted.value == Decimal("0.25")
        assert converted.unit == MeasurementUnit.LITER

    def test_gram_kilogram_round_trip(self):
        grams = Measurement(1000, MeasurementUnit.GRAM)

        kilograms = grams.converted(MeasurementUnit.KILOGRAM)
        back = kilograms.converted(MeasurementUnit.GRAM)

        assert kilograms.value == Decimal("1")
        assert kilograms.unit == MeasurementUnit.KILOGRAM
        assert back.value == Decimal("1000")
        assert back.unit == MeasurementUnit.GRAM
        assert back == grams

    def test_same_unit_is_identity(self):
        measurement = Measurement(3, MeasurementUnit.PIECE)
        assert measurement.converted(MeasurementUnit.PIECE) == measurement

    @pytest.mark.parametrize(
        "source,target",
        [
            (MeasurementUnit.GRAM, MeasurementUnit.MILLILITER),
            (MeasurementUnit.LITER, MeasurementUnit.KILOGRAM),
            (MeasurementUnit.PIECE, MeasurementUnit.GRAM),
        ],
    )
    def test_incompatible_units_do_not_convert(self, source, target):
        assert conversion_factor(source, target) is None
        assert Measurement(1, source).converted(target) is None
        assert not source.is_compatible_with(target)


class TestArithmetic:
    """Arithmetic converts the right operand into the left operand's unit."""

    def test_adding_converts_to_left_unit(self):
        total = Measurement(500, MeasurementUnit.MILLILITER) + Measurement(
            Decimal("0.25"), MeasurementUnit.LITER
        )
        assert total.value == Decimal("750")
        assert total.unit == MeasurementUnit.MILLILITER

    def test_adding_incompatible_gives_none(self):
        assert Measurement(1, MeasurementUnit.GRAM).adding(Measurement(1, "liter")) is None

    def test_subtracting_floors_at_zero(self):
        result = Measurement(100, MeasurementUnit.GRAM) - Measurement(1, MeasurementUnit.KILOGRAM)
        assert result.value == Decimal("0")

    def test_negative_values_are_clamped(self):
        assert Measurement(-5, MeasurementUnit.GRAM).value == Decimal("0")

    def test_multiplied(self):
        assert (Measurement(300, MeasurementUnit.MILLILITER) * 2).value == Decimal("600")
        assert (3 * Measurement(18, MeasurementUnit.GRAM)).value == Decimal("54")


class TestComparison:
    def test_greater_and_less_across_units(self):
        liter = Measurement(1, MeasurementUnit.LITER)
        assert liter > Measurement(999, MeasurementUnit.MILLILITER)
        assert Measurement(999, MeasurementUnit.MILLILITER) < liter

    def test_equality_uses_tolerance(self):
        kilogram = Measurement(1, MeasurementUnit.KILOGRAM)
        assert kilogram.is_equal_to(Measurement(Decimal("1000.0004"), MeasurementUnit.GRAM))
        assert not kilogram.is_equal_to(Measurement(Decimal("1001.5"), MeasurementUnit.GRAM))

    def test_incompatible_comparisons_are_false(self):
        gram = Measurement(1, MeasurementUnit.GRAM)
        piece = Measurement(1, MeasurementUnit.PIECE)
        assert not gram > piece
        assert not gram < piece
        assert not gram.is_equal_to(piece)


class TestFormatting:
    def test_display_string(self):
        assert Measurement(Decimal("1.50"), MeasurementUnit.KILOGRAM).display_string == "1.5 kg"
        assert Measurement(200, MeasurementUnit.MILLILITER).display_string == "200 ml"

    def test_dict_round_trip(self):
        measurement = Measurement(Decimal("2.5"), MeasurementUnit.LITER)
        assert Measurement.from_dict(measurement.to_dict()) == measurement

    @pytest.mark.parametrize(
        "data", [{}, {"value": "1"}, {"value": "abc", "unit": "gram"}, {"value": 1, "unit": "cup"}]
    )
    def test_from_dict_invalid_data(self, data):
        assert Measurement.from_dict(data) is None
