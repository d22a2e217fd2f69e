"""
Daily meal planner: the shuffle-all-slots orchestration.

MealPlanner holds the user's current diet filter and budget tier, runs a
shuffle pass over the four meal slots and keeps the latest slot -> recipe
mapping for the presentation layer.

A shuffle pass processes slots strictly in MEAL_SLOTS order. Each accepted
recipe is recorded into the used-recipe memory before the next slot is
drawn, so later slots never repeat an earlier pick from the same pass. A slot
that cannot be filled is left out of the mapping and does not stop the pass.
"""

import logging
import random
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Union

from meal_randomizer.catalog import RecipeCatalog, get_default_catalog
from meal_randomizer.connectors.base import BaseRecipeSource
from meal_randomizer.memory import UsedRecipeMemory
from meal_randomizer.models import (
    DEFAULT_BUDGET,
    MEAL_SLOTS,
    Recipe,
    budget_from_level,
    normalize_diet,
    validate_budget,
)
from meal_randomizer.selector import RecipeSelector
from meal_randomizer.store import InMemoryStore, JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)


class MealPlanner:
    """
    Session-scoped meal planner.

    Args:
        selector: Recipe selection policy
        memory: Used-recipe memory, already initialized
        diet: Initial diet tags (default: none)
        budget: Initial budget tier (default: "$$")
    """

    def __init__(
        self,
        selector: RecipeSelector,
        memory: UsedRecipeMemory,
        diet: Optional[Iterable[str]] = None,
        budget: Optional[str] = DEFAULT_BUDGET,
    ) -> None:
        self.selector = selector
        self.memory = memory
        self._diet: List[str] = normalize_diet(diet)
        self._budget: Optional[str] = validate_budget(budget)
        self._meals: Dict[str, Recipe] = {}
        self._lock = threading.Lock()

    @property
    def diet(self) -> List[str]:
        return list(self._diet)

    @diet.setter
    def diet(self, tags: Iterable[str]) -> None:
        self._diet = normalize_diet(tags)

    @property
    def budget(self) -> Optional[str]:
        return self._budget

    @budget.setter
    def budget(self, tier: Optional[str]) -> None:
        self._budget = validate_budget(tier)

    def toggle_diet(self, tag: str, checked: bool) -> List[str]:
        """Add or remove a single diet tag, checkbox style. Returns the new diet."""
        current = set(self._diet)
        if checked:
            current.add(tag)
        else:
            current.discard(tag)
        self.diet = current
        return self.diet

    def set_budget_level(self, level: int) -> str:
        """Set the budget from a 1-3 slider position. Returns the new tier."""
        self.budget = budget_from_level(level)
        return self._budget

    @property
    def meals(self) -> Mapping[str, Recipe]:
        """Read-only view of the recipes chosen by the last shuffle pass."""
        return MappingProxyType(self._meals)

    def generate_meals(self) -> Mapping[str, Recipe]:
        """
        Run one shuffle pass over all meal slots.

        Uses the same diet and budget for every slot. Each selected recipe is
        recorded into memory immediately. Slots with no recipe are omitted.

        Returns:
            Read-only mapping of meal slot to selected recipe.
        """
        with self._lock:
            diet = list(self._diet)
            budget = self._budget
            logger.info("Generating meals: diet=%r budget=%r", diet, budget)

            new_meals: Dict[str, Recipe] = {}
            for slot in MEAL_SLOTS:
                recipe = self.selector.select(slot, diet, budget, self.memory)
                if recipe is None:
                    continue
                new_meals[slot] = recipe
                self.memory.record(recipe.id)

            self._meals = new_meals
            logger.info(
                "Generated %d/%d meals; unfilled slots: %r",
                len(new_meals), len(MEAL_SLOTS), [s for s in MEAL_SLOTS if s not in new_meals],
            )
            return self.meals


def create_planner(
    memory_path: Optional[Union[str, Path]] = None,
    remote: Optional[BaseRecipeSource] = None,
    catalog: Optional[RecipeCatalog] = None,
    store: Optional[KeyValueStore] = None,
    rng: Optional[random.Random] = None,
) -> MealPlanner:
    """
    Wire up a planner with an initialized memory.

    Args:
        memory_path: JSON file for the used-recipe memory. Ignored when store is given;
            when both are None the memory lives in process only.
        remote: Remote fallback source (None runs local-only)
        catalog: Local catalog (defaults to the bundled recipes)
        store: Explicit key-value store for the memory
        rng: Random source for local picks

    Returns:
        MealPlanner ready for generate_meals()
    """
    if store is None:
        store = JsonFileStore(memory_path) if memory_path else InMemoryStore()

    memory = UsedRecipeMemory(store)
    memory.initialize()

    selector = RecipeSelector(catalog or get_default_catalog(), remote=remote, rng=rng)
    return MealPlanner(selector, memory)
