"""
Atomic check-and-decrement of ingredient stock for an order.

The reservation for one order reads every ingredient its lines consume,
verifies that each has enough stock available and adds the consumed amount to
`used`, all in one optimistic transaction. Either every ledger entry is
updated or none is.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_CEILING, Decimal
from typing import Dict, Iterable, List, Optional

from apps.core.conf import fulfillment_setting
from apps.core.exceptions import (
    InsufficientStock,
    OrderValidationError,
    UnitConversionError,
    UnknownIngredient,
)
from apps.core.transactions import TransactionRunner

from .alerts import IngredientAlert
from .measurement import Measurement, MeasurementUnit
from .models import Ingredient

logger = logging.getLogger(__name__)

# Resolution of Ingredient.used; consumption is rounded up to it
STORAGE_PRECISION = Decimal("0.000001")


@dataclass
class Requirement:
    """Total amount of one ingredient needed by an order, in its storage unit."""

    ingredient_id: str
    ingredient_name: str
    amount: Measurement


@dataclass
class ReservationResult:
    requirements: Dict[str, Requirement] = field(default_factory=dict)
    ingredients: List[Ingredient] = field(default_factory=list)
    alerts: List[IngredientAlert] = field(default_factory=list)


def referenced_ingredients(lines, catalog) -> Dict[str, str]:
    """Return {ingredient_id: ingredient_name} for every recipe the lines use."""
    referenced = {}
    for line in lines:
        for recipe in catalog.recipes_for(line.menu_item_id):
            referenced.setdefault(str(recipe.ingredient_id), recipe.ingredient_name)
    return referenced


def consolidate_requirements(
    lines: Iterable,
    catalog,
    units: Dict[str, MeasurementUnit],
    strict: bool = False,
) -> Dict[str, Requirement]:
    """
    Sum the ingredient amounts consumed by a set of order lines.

    Every recipe amount is converted into the storage unit of its ingredient
    and multiplied by the line quantity before it is added up.

    Args:
        lines: Objects with `menu_item_id`, `name` and `quantity`
        catalog: MenuCatalog resolving the recipes of a menu item
        units: Storage unit per ingredient id
        strict: Raise instead of skipping recipe amounts that cannot be
            converted

    Returns:
        Dict of ingredient id -> Requirement

    Raises:
        OrderValidationError: If a line's menu item is not in the catalog
        UnitConversionError: If strict and a recipe unit is incompatible
    """
    requirements: Dict[str, Requirement] = {}

    for line in lines:
        if not catalog.contains(line.menu_item_id):
            logger.warning(f"Menu item {line.menu_item_id} not found in catalog")
            raise OrderValidationError(f"{line.name} is not on the menu.")

        for recipe in catalog.recipes_for(line.menu_item_id):
            ingredient_id = str(recipe.ingredient_id)
            target_unit = units[ingredient_id]
            converted = recipe.required_amount.converted(target_unit)

            if converted is None:
                if strict:
                    raise UnitConversionError(
                        recipe.ingredient_name, recipe.required_amount.unit.value, target_unit
                    )
                logger.warning(
                    f"Cannot convert {recipe.required_amount.unit.value} to {target_unit} "
                    f"for ingredient {recipe.ingredient_name}, skipping"
                )
                continue

            amount = converted.multiplied(line.quantity)
            existing = requirements.get(ingredient_id)
            if existing is None:
                requirements[ingredient_id] = Requirement(
                    ingredient_id=ingredient_id,
                    ingredient_name=recipe.ingredient_name,
                    amount=amount,
                )
            else:
                existing.amount = existing.amount.adding(amount)

    return requirements


class ReservationEngine:
    """
    Reserve the stock an order consumes.

    Args:
        catalog: MenuCatalog used to resolve recipes
        runner: TransactionRunner executing the reservation transaction
        strict: Abort on unconvertible recipe units (defaults to
            POS_FULFILLMENT["STRICT_UNIT_CONVERSION"])
    """

    def __init__(self, catalog, runner: Optional[TransactionRunner] = None, strict=None):
        self.catalog = catalog
        self.runner = runner or TransactionRunner()
        self.strict = fulfillment_setting("STRICT_UNIT_CONVERSION") if strict is None else strict

    def reserve(self, lines, shop=None) -> ReservationResult:
        """
        Reserve stock for the given order lines.

        Args:
            lines: Order items or cart lines (`menu_item_id`, `quantity`)
            shop: Restrict ingredients to this shop

        Returns:
            ReservationResult with the consolidated requirements, the
            committed ledger entries and the low-stock alerts

        Raises:
            InsufficientStock: If any ingredient lacks stock (nothing written)
            OrderValidationError: If a menu item is not in the catalog
            UnknownIngredient: If a recipe points at a missing ledger entry
            UnitConversionError: If strict and a recipe unit is incompatible
            TransientConflict: If concurrent updates exhausted the retries
        """
        lines = list(lines)
        referenced = referenced_ingredients(lines, self.catalog)

        def body(tx):
            ingredients = {}
            for ingredient_id, name in referenced.items():
                try:
                    ingredient = tx.read(Ingredient, ingredient_id)
                except Ingredient.DoesNotExist:
                    raise UnknownIngredient(ingredient_id, name)
                if shop is not None and ingredient.shop_id != shop.pk:
                    raise UnknownIngredient(ingredient_id, name)
                ingredients[ingredient_id] = ingredient

            units = {key: MeasurementUnit(value.unit) for key, value in ingredients.items()}
            requirements = consolidate_requirements(lines, self.catalog, units, self.strict)

            consumed = {
                ingredient_id: requirement.amount.value.quantize(
                    STORAGE_PRECISION, rounding=ROUND_CEILING
                )
                for ingredient_id, requirement in requirements.items()
            }

            for ingredient_id in requirements:
                ingredient = ingredients[ingredient_id]
                required = consumed[ingredient_id]
                if ingredient.available < required:
                    logger.info(
                        f"Insufficient {ingredient.name}: "
                        f"available {ingredient.available}, required {required}"
                    )
                    raise InsufficientStock(
                        ingredient.name, available=ingredient.available, required=required
                    )

            for ingredient_id in requirements:
                ingredient = ingredients[ingredient_id]
                ingredient.used = ingredient.used + consumed[ingredient_id]
                tx.write(ingredient, ["used"])

            return requirements, [ingredients[key] for key in requirements]

        requirements, touched = self.runner.run(body, label="reserve stock")

        alerts = [
            IngredientAlert.for_ingredient(ingredient)
            for ingredient in touched
            if ingredient.needs_alert()
        ]
        for alert in alerts:
            logger.info(f"Low stock alert: {alert.message}")

        return ReservationResult(requirements=requirements, ingredients=touched, alerts=alerts)
