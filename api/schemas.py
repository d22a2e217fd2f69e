"""
Pydantic schemas for FastAPI request and response models.

The schemas include:
- Preferences / PreferencesUpdate: the current diet filter and budget tier
- MealCard: one rendered meal slot (recipe fields plus display helpers)
- MealsResponse: mapping of meal slot to MealCard; unfilled slots are absent
- MemoryView: the used-recipe memory as stored
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from meal_randomizer.models import Recipe, format_price_per_serving


class Preferences(BaseModel):
    """Current filters applied to every shuffle pass."""
    diet: List[str] = Field(default_factory=list, description="Diet tags a recipe must all carry")
    budget: Optional[str] = Field(None, description="Budget tier: '$', '$$', '$$$' or null for any")


class PreferencesUpdate(BaseModel):
    """
    Partial update of the filters.

    Fields left out keep their current value. budget_level (1-3) is the slider
    form of budget and wins over budget when both are given.
    """
    diet: Optional[List[str]] = Field(None, description="Replacement diet tags")
    budget: Optional[str] = Field(None, description="Budget tier: '$', '$$' or '$$$'")
    budget_level: Optional[int] = Field(None, ge=1, le=3, description="Budget slider position (1-3)")
    clear_budget: bool = Field(False, description="Set budget to null (no budget filtering)")


class MealCard(BaseModel):
    """A recipe as shown for one meal slot."""
    meal_type: str = Field(..., description="Meal slot (breakfast, lunch, dinner, dessert)")
    source: str = Field(..., description="'local' or 'remote'")
    id: int = Field(..., description="Recipe identifier")
    name: str = Field(..., description="Recipe name")
    instructions: str = Field(..., description="Instructions (may contain HTML for remote recipes)")
    image: Optional[str] = Field(None, description="Image URL")
    diet: Optional[List[str]] = Field(None, description="Diet tags (local recipes)")
    budget: Optional[str] = Field(None, description="Budget tier (local recipes)")
    ingredients: Optional[List[str]] = Field(None, description="Ingredient lines (remote recipes)")
    price_per_serving: Optional[int] = Field(None, description="Price per serving in cents (remote recipes)")
    price_label: Optional[str] = Field(None, description="Formatted price per serving, e.g. '$1.63 per serving'")
    ready_in_minutes: Optional[int] = Field(None, description="Preparation time in minutes (remote recipes)")
    source_url: Optional[str] = Field(None, description="Full recipe link (remote recipes)")

    @classmethod
    def from_recipe(cls, meal_type: str, recipe: Recipe) -> "MealCard":
        data = recipe.model_dump()
        return cls(
            meal_type=meal_type,
            price_label=format_price_per_serving(data.get("price_per_serving")),
            **data,
        )


class MealsResponse(BaseModel):
    meals: Dict[str, MealCard] = Field(default_factory=dict, description="Selected recipe per meal slot")


class MemoryView(BaseModel):
    used_ids: List[int] = Field(default_factory=list, description="Served recipe ids, oldest first")
    last_reset: Optional[int] = Field(None, description="Last reset time in ms since epoch")
