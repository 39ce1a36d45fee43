"""
Read-only recipe lookup used by the reservation engine.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from apps.inventory.measurement import Measurement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipeLine:
    ingredient_id: str
    ingredient_name: str
    required_amount: Measurement


class MenuCatalog:
    """Maps a menu item id to the recipe lines consumed by one unit of it."""

    def contains(self, menu_item_id) -> bool:
        raise NotImplementedError

    def recipes_for(self, menu_item_id) -> List[RecipeLine]:
        raise NotImplementedError


class StaticMenuCatalog(MenuCatalog):
    """
    Catalog backed by an in-memory mapping.

    Args:
        recipes: Dict of menu item id -> iterable of RecipeLine
    """

    def __init__(self, recipes: Optional[Dict[str, Iterable[RecipeLine]]] = None):
        self._recipes = {str(key): list(lines) for key, lines in (recipes or {}).items()}

    def contains(self, menu_item_id) -> bool:
        return str(menu_item_id) in self._recipes

    def recipes_for(self, menu_item_id) -> List[RecipeLine]:
        return list(self._recipes.get(str(menu_item_id), []))


class DatabaseMenuCatalog(MenuCatalog):
    """
    Catalog loaded from a shop's menu items and recipes.

    The menu is loaded once, on first use, and kept for the lifetime of the
    catalog. Build a new catalog per submission to pick up menu edits.
    """

    def __init__(self, shop):
        self.shop = shop
        self._recipes = None

    def _load(self):
        from .models import MenuItem, Recipe

        recipes = defaultdict(list)
        for menu_item_id in MenuItem.objects.filter(shop=self.shop).values_list("id", flat=True):
            recipes[str(menu_item_id)] = []

        for recipe in Recipe.objects.filter(menu_item__shop=self.shop).order_by("pk"):
            recipes[str(recipe.menu_item_id)].append(
                RecipeLine(
                    ingredient_id=str(recipe.ingredient_id),
                    ingredient_name=recipe.ingredient_name,
                    required_amount=recipe.required_amount,
                )
            )

        logger.debug(f"Loaded {len(recipes)} menu items for shop {self.shop.pk}")
        return dict(recipes)

    @property
    def recipes(self):
        if self._recipes is None:
            self._recipes = self._load()
        return self._recipes

    def contains(self, menu_item_id) -> bool:
        return str(menu_item_id) in self.recipes

    def recipes_for(self, menu_item_id) -> List[RecipeLine]:
        return list(self.recipes.get(str(menu_item_id), []))
