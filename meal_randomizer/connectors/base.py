"""
Base class for remote recipe sources.

A remote source is consulted only when the local catalog cannot satisfy the
current filters. It returns at most one recipe per query and signals "nothing
found" with None. Implementations own their own tag mapping (how diet tags and
the budget tier translate to the provider's query language) and must swallow
transport and parse failures, logging them and returning None.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from meal_randomizer.models import RemoteRecipe


class BaseRecipeSource(ABC):
    """
    Abstract base class for remote recipe providers.

    Attributes:
        name: Short identifier for the provider (e.g., "spoonacular")
    """
    name: str

    @abstractmethod
    def fetch_random_recipe(
        self,
        slot: str,
        diet: List[str],
        budget: Optional[str],
    ) -> Optional[RemoteRecipe]:
        """
        Fetch one random recipe for a meal slot.

        Args:
            slot: Meal slot name (e.g., "lunch")
            diet: Requested diet tags, in canonical order
            budget: Budget tier ("$", "$$", "$$$") or None

        Returns:
            A RemoteRecipe, or None when the provider has nothing or fails.
        """
        pass
