"""
Recipe models and filter vocabulary for the meal randomizer.

This module defines the canonical recipe schemas used throughout the package.
Recipes come in two shapes:

- LocalRecipe: bundled catalog entries, tagged with dietary attributes and a
  budget tier ("$", "$$", "$$$").
- RemoteRecipe: records mapped from the Spoonacular random-recipe endpoint,
  carrying ingredients, price per serving, preparation time and a source link.

Both share the display-relevant fields of RecipeBase (id, name, instructions,
image) and carry a ``source`` discriminator so callers never need to inspect
for optional fields.

The module also owns the fixed vocabularies (meal slots, diet tags, budget
tiers) and the small helpers that validate and normalize them.
"""

from typing import Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Meal slots, in the order a shuffle pass processes them
BREAKFAST = "breakfast"
LUNCH = "lunch"
DINNER = "dinner"
DESSERT = "dessert"

MEAL_SLOTS = (BREAKFAST, LUNCH, DINNER, DESSERT)

# Dietary tags, in the order they are sent to the remote source
VEGETARIAN = "vegetarian"
GLUTEN_FREE = "gluten-free"
HIGH_PROTEIN = "high-protein"

DIET_TAGS = (VEGETARIAN, GLUTEN_FREE, HIGH_PROTEIN)

# Budget tiers, lowest first
BUDGET_LOW = "$"
BUDGET_MEDIUM = "$$"
BUDGET_HIGH = "$$$"

BUDGET_TIERS = (BUDGET_LOW, BUDGET_MEDIUM, BUDGET_HIGH)

DEFAULT_BUDGET = BUDGET_MEDIUM

NO_INSTRUCTIONS = "No instructions provided."

RecipeId = int


class RecipeBase(BaseModel):
    """
    Fields every recipe exposes, whatever its origin.

    Attributes:
        id: Recipe identifier. Local ids are unique within a meal slot pool;
            remote ids come from Spoonacular and may collide with local ones.
        name: Display name
        instructions: Instruction text (remote instructions may contain HTML)
        image: Image URL, if any
    """
    id: RecipeId = Field(..., description="Recipe identifier")
    name: str = Field(..., description="Display name")
    instructions: str = Field(NO_INSTRUCTIONS, description="Preparation instructions")
    image: Optional[str] = Field(None, description="URL to recipe image")

    model_config = ConfigDict(frozen=True)


class LocalRecipe(RecipeBase):
    """Recipe from the bundled catalog."""
    source: Literal["local"] = "local"
    diet: List[str] = Field(default_factory=list, description="Dietary tags this recipe satisfies")
    budget: str = Field(..., description="Budget tier: '$', '$$' or '$$$'")

    @field_validator("budget")
    @classmethod
    def _check_budget(cls, value: str) -> str:
        if value not in BUDGET_TIERS:
            raise ValueError(f"Invalid budget tier: {value!r}. Must be one of {list(BUDGET_TIERS)}")
        return value

    @field_validator("diet")
    @classmethod
    def _check_diet(cls, value: List[str]) -> List[str]:
        unknown = [tag for tag in value if tag not in DIET_TAGS]
        if unknown:
            raise ValueError(f"Unknown diet tag(s): {unknown}. Must be among {list(DIET_TAGS)}")
        return value


class RemoteRecipe(RecipeBase):
    """Recipe fetched from the remote recipe source."""
    source: Literal["remote"] = "remote"
    ingredients: List[str] = Field(default_factory=list, description="Ingredient lines, in recipe order")
    price_per_serving: Optional[int] = Field(None, ge=0, description="Price per serving in cents")
    ready_in_minutes: Optional[int] = Field(None, ge=0, description="Preparation time in minutes")
    source_url: Optional[str] = Field(None, description="Link to the full recipe")


Recipe = Union[LocalRecipe, RemoteRecipe]


def normalize_diet(tags: Optional[Iterable[str]]) -> List[str]:
    """
    Validate a collection of diet tags and return them in canonical order.

    Duplicates are dropped; order of the input does not matter.

    Raises:
        ValueError: If any tag is not one of DIET_TAGS
    """
    requested = set(tags or [])
    unknown = sorted(requested - set(DIET_TAGS))
    if unknown:
        raise ValueError(f"Unknown diet tag(s): {unknown}. Must be among {list(DIET_TAGS)}")
    return [tag for tag in DIET_TAGS if tag in requested]


def validate_budget(budget: Optional[str]) -> Optional[str]:
    """Return budget unchanged if it is a known tier or None; raise ValueError otherwise."""
    if budget is not None and budget not in BUDGET_TIERS:
        raise ValueError(f"Invalid budget tier: {budget!r}. Must be one of {list(BUDGET_TIERS)}")
    return budget


def budget_from_level(level: int) -> str:
    """
    Map a 1-3 slider position to its budget tier.

    Examples:
        >>> budget_from_level(1)
        '$'
        >>> budget_from_level(3)
        '$$$'
    """
    if level not in (1, 2, 3):
        raise ValueError(f"Budget level must be 1, 2 or 3, got {level!r}")
    return BUDGET_TIERS[level - 1]


def format_price_per_serving(cents: Optional[int]) -> Optional[str]:
    """
    Format a price in cents as a per-serving label.

    Examples:
        >>> format_price_per_serving(163)
        '$1.63 per serving'
        >>> format_price_per_serving(None) is None
        True
    """
    if not cents:
        return None
    return f"${cents / 100:.2f} per serving"
