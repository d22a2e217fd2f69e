"""
FastAPI application for the Daily Meal Randomizer API.

This module exposes the meal planner to a presentation layer:
- GET /preferences: Current diet filter and budget tier
- PUT /preferences: Update the diet filter and/or budget tier
- PUT /preferences/diet/{tag}: Check or uncheck a single diet tag
- POST /meals/shuffle: Run one shuffle pass over breakfast, lunch, dinner and dessert
- GET /meals: Recipes chosen by the last shuffle pass
- GET /memory: Recipe ids served in the current week
- GET /health: Health check

One planner (and one used-recipe memory) is shared by the whole process.

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging
import threading
import time
from typing import Optional

from fastapi import FastAPI, HTTPException, status

from api.config import MemoryConfig, SpoonacularConfig, configure_logging, get_required_env_vars
from api.schemas import MealCard, MealsResponse, MemoryView, Preferences, PreferencesUpdate
from meal_randomizer.connectors.base import BaseRecipeSource
from meal_randomizer.connectors.spoonacular_connector import SpoonacularConnector
from meal_randomizer.models import normalize_diet, validate_budget
from meal_randomizer.planner import MealPlanner, create_planner

configure_logging()
logger = logging.getLogger(__name__)

APP_NAME = "Daily Meal Randomizer API"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Random daily meals from a local catalog with Spoonacular fallback, filtered by diet and budget"

# Track app start time for uptime calculation
_APP_START_TIME = time.time()

app = FastAPI(
    title=APP_NAME,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    tags_metadata=[
        {
            "name": "meals",
            "description": "Shuffle and view the daily meals.",
        },
        {
            "name": "preferences",
            "description": "Diet filter and budget tier applied to every shuffle.",
        },
        {
            "name": "health",
            "description": "Health check and monitoring endpoints.",
        },
    ],
)

_planner: Optional[MealPlanner] = None
_planner_lock = threading.Lock()


def build_remote_source() -> Optional[BaseRecipeSource]:
    """
    Create the Spoonacular connector, or None when it is not configured.

    A missing API key is not fatal: the planner then runs local-only.
    """
    try:
        return SpoonacularConnector(
            api_key=SpoonacularConfig.get_api_key(),
            base_url=SpoonacularConfig.get_base_url(),
            timeout=SpoonacularConfig.get_timeout_seconds(),
        )
    except RuntimeError as e:
        logger.warning("Remote recipe source disabled: %s", e)
        return None


def get_planner() -> MealPlanner:
    """Return the process-wide planner, creating it on first use."""
    global _planner
    with _planner_lock:
        if _planner is None:
            _planner = create_planner(
                memory_path=MemoryConfig.get_memory_file(),
                remote=build_remote_source(),
            )
        return _planner


def meals_response(planner: MealPlanner) -> MealsResponse:
    return MealsResponse(
        meals={
            slot: MealCard.from_recipe(slot, recipe)
            for slot, recipe in planner.meals.items()
        }
    )


@app.get("/preferences", response_model=Preferences, tags=["preferences"])
def get_preferences() -> Preferences:
    """
    Get the current diet filter and budget tier.

    Returns:
        Preferences with diet tags (canonical order) and budget tier
    """
    planner = get_planner()
    return Preferences(diet=planner.diet, budget=planner.budget)


@app.put("/preferences", response_model=Preferences, tags=["preferences"])
def update_preferences(update: PreferencesUpdate) -> Preferences:
    """
    Update the diet filter and/or budget tier used by the next shuffle.

    Args:
        update: Fields to change; omitted fields are kept

    Returns:
        The updated preferences

    Raises:
        HTTPException 400: If a diet tag or budget tier is unknown
    """
    planner = get_planner()

    # Validate all fields before applying any; budget_level is range-checked by the schema
    use_budget = not update.clear_budget and update.budget_level is None
    try:
        diet = normalize_diet(update.diet) if update.diet is not None else planner.diet
        budget = validate_budget(update.budget) if use_budget and update.budget is not None else planner.budget
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    planner.diet = diet
    if update.clear_budget:
        planner.budget = None
    elif update.budget_level is not None:
        planner.set_budget_level(update.budget_level)
    else:
        planner.budget = budget
    logger.info("Preferences updated: diet=%r budget=%r", planner.diet, planner.budget)
    return Preferences(diet=planner.diet, budget=planner.budget)


@app.put("/preferences/diet/{tag}", response_model=Preferences, tags=["preferences"])
def set_diet_tag(tag: str, checked: bool = True) -> Preferences:
    """
    Check or uncheck one diet tag, leaving the other tags as they are.

    Args:
        tag: Diet tag (vegetarian, gluten-free, high-protein)
        checked: True to require the tag, False to drop it

    Raises:
        HTTPException 400: If the tag is unknown
    """
    planner = get_planner()
    try:
        planner.toggle_diet(tag, checked)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    return Preferences(diet=planner.diet, budget=planner.budget)


@app.post("/meals/shuffle", response_model=MealsResponse, tags=["meals"])
def shuffle_meals() -> MealsResponse:
    """
    Pick a new recipe for every meal slot.

    Slots that neither the local catalog nor the remote source can fill are
    omitted from the response; this is not an error.

    Returns:
        MealsResponse mapping meal slot to MealCard
    """
    planner = get_planner()
    planner.generate_meals()
    return meals_response(planner)


@app.get("/meals", response_model=MealsResponse, tags=["meals"])
def get_meals() -> MealsResponse:
    """Return the meals chosen by the last shuffle (empty before the first one)."""
    return meals_response(get_planner())


@app.get("/memory", response_model=MemoryView, tags=["meals"])
def get_memory() -> MemoryView:
    """Return the recipe ids served since the last weekly reset."""
    memory = get_planner().memory
    return MemoryView(used_ids=memory.ids, last_reset=memory.last_reset)


@app.get("/health", tags=["health"])
def health():
    """
    Health check endpoint for monitoring and status checks.

    Returns:
        Dictionary with status, API metadata, uptime, and whether the remote
        recipe source is configured. Always returns 200 OK if reachable.
    """
    uptime_seconds = int(time.time() - _APP_START_TIME)

    return {
        "status": "ok",
        "name": APP_NAME,
        "version": APP_VERSION,
        "uptime_seconds": uptime_seconds,
        "remote_enabled": SpoonacularConfig.get_api_key() is not None,
        "config": get_required_env_vars(),
    }


@app.get("/")
def root():
    """
    Root endpoint providing API information.

    Returns:
        Dictionary with API name and version
    """
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
        "docs": "/docs",
    }
