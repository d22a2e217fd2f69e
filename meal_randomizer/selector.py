"""
Recipe selection policy.

For one meal slot the selector:
1. takes the slot's pool from the local catalog,
2. drops recipes already in the used-recipe memory,
3. keeps recipes carrying every requested diet tag (AND, not OR),
4. keeps recipes whose budget tier equals the requested tier exactly
   (no filtering when the tier is unset),
5. picks one survivor uniformly at random,
6. and, when nothing survives, asks the remote source once with the same
   slot, diet and budget.

A slot that neither path can fill yields None. The selector never writes to
memory; recording an accepted recipe is the caller's job.
"""

import logging
import random
from typing import Iterable, List, Optional

from meal_randomizer.catalog import RecipeCatalog
from meal_randomizer.connectors.base import BaseRecipeSource
from meal_randomizer.memory import UsedRecipeMemory
from meal_randomizer.models import LocalRecipe, Recipe

logger = logging.getLogger(__name__)


def matches_diet(recipe: LocalRecipe, diet: Iterable[str]) -> bool:
    """True if the recipe carries every tag in diet (an empty diet matches everything)."""
    return all(tag in recipe.diet for tag in diet)


def matches_budget(recipe: LocalRecipe, budget: Optional[str]) -> bool:
    """True if budget is unset or equals the recipe's tier."""
    return not budget or recipe.budget == budget


def filter_candidates(
    candidates: Iterable[LocalRecipe],
    diet: Iterable[str],
    budget: Optional[str],
    memory: UsedRecipeMemory,
) -> List[LocalRecipe]:
    """Apply the novelty, diet and budget filters, preserving catalog order."""
    diet = list(diet)
    return [
        recipe for recipe in candidates
        if not memory.contains(recipe.id)
        and matches_diet(recipe, diet)
        and matches_budget(recipe, budget)
    ]


class RecipeSelector:
    """
    Local-first recipe picker with remote fallback.

    Args:
        catalog: Local recipe pools
        remote: Remote recipe source, or None to run local-only
        rng: Random source for the uniform pick (seed it for reproducible tests)
    """

    def __init__(
        self,
        catalog: RecipeCatalog,
        remote: Optional[BaseRecipeSource] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.catalog = catalog
        self.remote = remote
        self.rng = rng or random.Random()

    def pick_local(
        self,
        slot: str,
        diet: Iterable[str],
        budget: Optional[str],
        memory: UsedRecipeMemory,
    ) -> Optional[LocalRecipe]:
        """Random local recipe passing all filters, or None if the pool is exhausted."""
        options = filter_candidates(self.catalog.candidates(slot), diet, budget, memory)
        if not options:
            return None
        return self.rng.choice(options)

    def fetch_remote(
        self,
        slot: str,
        diet: Iterable[str],
        budget: Optional[str],
    ) -> Optional[Recipe]:
        """Ask the remote source for one recipe; any failure counts as nothing found."""
        if self.remote is None:
            logger.debug("No remote recipe source configured, skipping fallback for slot=%r", slot)
            return None
        try:
            return self.remote.fetch_random_recipe(slot, list(diet), budget)
        except Exception as e:
            logger.warning("Remote source %s failed for slot=%r: %s", getattr(self.remote, "name", "?"), slot, e)
            return None

    def select(
        self,
        slot: str,
        diet: Iterable[str],
        budget: Optional[str],
        memory: UsedRecipeMemory,
    ) -> Optional[Recipe]:
        """
        Select one recipe for a meal slot.

        Args:
            slot: Meal slot name (e.g., "breakfast")
            diet: Diet tags that must all be present on a local recipe
            budget: Exact budget tier to match, or None for any tier
            memory: Used-recipe memory; its ids are excluded from local picks

        Returns:
            A LocalRecipe or RemoteRecipe, or None if neither path found one.
        """
        diet = list(diet)

        local = self.pick_local(slot, diet, budget, memory)
        if local is not None:
            logger.debug("Picked local recipe id=%r for slot=%r", local.id, slot)
            return local

        logger.debug("Local catalog exhausted for slot=%r diet=%r budget=%r, trying remote", slot, diet, budget)
        recipe = self.fetch_remote(slot, diet, budget)
        if recipe is None:
            logger.info("No recipe found for slot=%r", slot)
        return recipe
