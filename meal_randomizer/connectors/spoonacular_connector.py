"""
Spoonacular connector for random recipe lookups.

This connector calls Spoonacular's ``GET /recipes/random`` endpoint to fetch a
single recipe matching a meal slot, diet tags and (optionally) a budget tier,
and maps the raw record into a RemoteRecipe.

Tag mapping:
- The meal slot is always sent as the first tag (e.g., "breakfast")
- Diet tags follow in canonical order (vegetarian, gluten-free, high-protein)
- The lowest budget tier ("$") adds the coarse "cheap" tag; other tiers send nothing

Failures (network errors, non-2xx responses, malformed JSON, records that do
not validate, empty result lists) are logged and reported as None.

Requires SPOONACULAR_API_KEY in the environment or .env file.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv
from pydantic import ValidationError

from meal_randomizer.models import BUDGET_LOW, DIET_TAGS, NO_INSTRUCTIONS, RemoteRecipe

from .base import BaseRecipeSource

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.spoonacular.com"
DEFAULT_TIMEOUT_SECONDS = 10.0

CHEAP_TAG = "cheap"


def build_tags(slot: str, diet: List[str], budget: Optional[str]) -> List[str]:
    """
    Build the Spoonacular tag list for a query.

    Examples:
        >>> build_tags("lunch", ["gluten-free", "vegetarian"], "$")
        ['lunch', 'vegetarian', 'gluten-free', 'cheap']
        >>> build_tags("dinner", [], "$$")
        ['dinner']
    """
    tags = [slot]
    tags.extend(tag for tag in DIET_TAGS if tag in diet)
    if budget == BUDGET_LOW:
        tags.append(CHEAP_TAG)
    return tags


def normalize_recipe(item: Dict[str, Any]) -> RemoteRecipe:
    """
    Map a raw Spoonacular recipe record into a RemoteRecipe.

    Raises:
        KeyError: If the record has no id or title
        ValidationError: If the mapped fields do not validate
    """
    ingredients = [
        ing.get("original") or ""
        for ing in item.get("extendedIngredients") or []
        if isinstance(ing, dict)
    ]

    # Spoonacular reports fractional cents (e.g., 163.15)
    price = item.get("pricePerServing")
    price_cents = int(round(float(price))) if price is not None else None

    return RemoteRecipe(
        id=item["id"],
        name=item["title"],
        instructions=item.get("instructions") or NO_INSTRUCTIONS,
        ingredients=ingredients,
        price_per_serving=price_cents,
        ready_in_minutes=item.get("readyInMinutes"),
        source_url=item.get("sourceUrl"),
        image=item.get("image"),
    )


class SpoonacularConnector(BaseRecipeSource):
    """
    Remote recipe source backed by the Spoonacular API.

    Uses a requests.Session so connections are reused across the slots of a
    shuffle pass.
    """
    name = "spoonacular"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the Spoonacular connector.

        Args:
            api_key: Spoonacular API key (optional, reads from SPOONACULAR_API_KEY env var if not provided)
            base_url: API base URL (optional, reads from SPOONACULAR_BASE_URL or defaults to https://api.spoonacular.com)
            timeout: Request timeout in seconds (optional, reads from SPOONACULAR_TIMEOUT_SECONDS or defaults to 10)
            session: requests.Session to use (optional, a new one is created if not provided)

        Raises:
            RuntimeError: If SPOONACULAR_API_KEY is not set.
        """
        load_dotenv()

        key = api_key or os.getenv("SPOONACULAR_API_KEY")
        if not key:
            raise RuntimeError(
                "SPOONACULAR_API_KEY is not set. Please add it to your .env file at the project root:\n"
                "SPOONACULAR_API_KEY=your_spoonacular_key_here"
            )

        self.api_key = key
        self.base_url = (base_url or os.getenv("SPOONACULAR_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")

        if timeout is None:
            try:
                timeout = float(os.getenv("SPOONACULAR_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
            except ValueError:
                timeout = DEFAULT_TIMEOUT_SECONDS
        self.timeout = timeout

        self.session = session or requests.Session()

    def fetch_random_recipe(
        self,
        slot: str,
        diet: List[str],
        budget: Optional[str],
    ) -> Optional[RemoteRecipe]:
        """
        Fetch one random recipe from Spoonacular.

        Args:
            slot: Meal slot name, sent as the first tag
            diet: Requested diet tags
            budget: Budget tier; only "$" changes the query (adds "cheap")

        Returns:
            RemoteRecipe for the first returned record, or None if Spoonacular
            returned nothing or the call failed.
        """
        params = {
            "number": 1,
            "tags": ",".join(build_tags(slot, diet, budget)),
            "apiKey": self.api_key,
        }
        url = f"{self.base_url}/recipes/random"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning("Spoonacular request failed for slot=%r: %s", slot, e)
            return None
        except ValueError as e:
            logger.warning("Spoonacular returned invalid JSON for slot=%r: %s", slot, e)
            return None

        recipes = data.get("recipes") if isinstance(data, dict) else None
        if not recipes:
            logger.info("Spoonacular returned no recipes for slot=%r tags=%r", slot, params["tags"])
            return None

        try:
            return normalize_recipe(recipes[0])
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning("Unexpected Spoonacular recipe format for slot=%r: %s", slot, e)
            return None
