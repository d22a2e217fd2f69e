"""
Local recipe catalog.

The catalog is a static, read-only set of recipes partitioned by meal slot.
It is consulted before any remote lookup. The bundled pool is intentionally
small; when it runs dry for a given filter combination the selector falls
back to the remote source.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from meal_randomizer.models import (
    BREAKFAST,
    BUDGET_LOW,
    BUDGET_MEDIUM,
    DESSERT,
    DINNER,
    GLUTEN_FREE,
    HIGH_PROTEIN,
    LUNCH,
    VEGETARIAN,
    LocalRecipe,
)

_PLACEHOLDER_IMAGE = "https://via.placeholder.com/300x200?text={}"

# Bundled recipe pools
_LOCAL_RECIPES: Dict[str, List[LocalRecipe]] = {
    BREAKFAST: [
        LocalRecipe(
            id=1,
            name="Oatmeal with Fruit",
            diet=[VEGETARIAN, GLUTEN_FREE],
            budget=BUDGET_LOW,
            instructions="Cook oats, top with fruit.",
            image=_PLACEHOLDER_IMAGE.format("Oatmeal"),
        ),
        LocalRecipe(
            id=2,
            name="Avocado Toast",
            diet=[VEGETARIAN],
            budget=BUDGET_MEDIUM,
            instructions="Toast bread, mash avocado, season.",
            image=_PLACEHOLDER_IMAGE.format("Avocado+Toast"),
        ),
    ],
    LUNCH: [
        LocalRecipe(
            id=3,
            name="Chicken Salad",
            diet=[HIGH_PROTEIN],
            budget=BUDGET_MEDIUM,
            instructions="Mix grilled chicken with greens.",
            image=_PLACEHOLDER_IMAGE.format("Chicken+Salad"),
        ),
    ],
    DINNER: [
        LocalRecipe(
            id=4,
            name="Veggie Stir Fry",
            diet=[VEGETARIAN, GLUTEN_FREE],
            budget=BUDGET_LOW,
            instructions="Stir fry vegetables, add sauce.",
            image=_PLACEHOLDER_IMAGE.format("Veggie+Stir+Fry"),
        ),
    ],
    DESSERT: [
        LocalRecipe(
            id=5,
            name="Fruit Salad",
            diet=[VEGETARIAN, GLUTEN_FREE],
            budget=BUDGET_LOW,
            instructions="Chop seasonal fruits, mix.",
            image=_PLACEHOLDER_IMAGE.format("Fruit+Salad"),
        ),
    ],
}


class RecipeCatalog:
    """
    Immutable recipe pools keyed by meal slot.

    Args:
        recipes: Mapping of meal slot to recipes. Defaults to the bundled pools.
    """

    def __init__(self, recipes: Optional[Mapping[str, Iterable[LocalRecipe]]] = None) -> None:
        source = _LOCAL_RECIPES if recipes is None else recipes
        self._pools: Dict[str, Tuple[LocalRecipe, ...]] = {
            slot: tuple(pool) for slot, pool in source.items()
        }

    def candidates(self, slot: str) -> List[LocalRecipe]:
        """
        Return the full, unfiltered pool for a meal slot.

        Unknown slots yield an empty list rather than an error.
        """
        return list(self._pools.get(slot, ()))

    def slots(self) -> List[str]:
        """Meal slots that have a pool, in insertion order (useful for testing)."""
        return list(self._pools)

    def __len__(self) -> int:
        """Total number of recipes across all pools (useful for testing)."""
        return sum(len(pool) for pool in self._pools.values())


def get_default_catalog() -> RecipeCatalog:
    """Catalog backed by the bundled recipes."""
    return RecipeCatalog()
