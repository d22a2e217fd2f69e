"""
End-to-end tests for the meal planner HTTP endpoints.

The process-wide planner is replaced with one backed by an in-memory store
and a mocked remote source, so no files are written and no network is used.
"""

import random
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from api.main import app, build_remote_source
from meal_randomizer.models import MEAL_SLOTS, RemoteRecipe
from meal_randomizer.planner import create_planner
from meal_randomizer.store import InMemoryStore


@pytest.fixture
def remote():
    source = Mock()
    source.name = "mock"
    source.fetch_random_recipe.return_value = RemoteRecipe(
        id=716429,
        name="Pasta with Garlic",
        instructions="<p>Boil.</p>",
        ingredients=["1 tbsp butter"],
        price_per_serving=163,
        ready_in_minutes=45,
        source_url="https://example.com/pasta",
    )
    return source


@pytest.fixture
def planner(remote):
    return create_planner(store=InMemoryStore(), remote=remote, rng=random.Random(0))


@pytest.fixture
def client(planner):
    """Create a test client whose endpoints use the fixture planner."""
    with patch("api.main.get_planner", return_value=planner):
        yield TestClient(app)


class TestPreferencesEndpoints:
    """Tests for GET/PUT /preferences."""

    def test_default_preferences(self, client):
        response = client.get("/preferences")
        assert response.status_code == 200
        assert response.json() == {"diet": [], "budget": "$$"}

    def test_update_diet_and_budget(self, client):
        response = client.put("/preferences", json={"diet": ["gluten-free", "vegetarian"], "budget": "$"})
        assert response.status_code == 200
        assert response.json() == {"diet": ["vegetarian", "gluten-free"], "budget": "$"}

    def test_update_budget_level(self, client, planner):
        """Test that the slider position goes through the planner's budget level setter."""
        with patch.object(planner, "set_budget_level", wraps=planner.set_budget_level) as set_level:
            response = client.put("/preferences", json={"budget_level": 3})
        assert response.json()["budget"] == "$$$"
        set_level.assert_called_once_with(3)

    def test_clear_budget(self, client):
        response = client.put("/preferences", json={"clear_budget": True})
        assert response.json()["budget"] is None

    def test_unknown_diet_tag_is_400(self, client):
        response = client.put("/preferences", json={"diet": ["keto"]})
        assert response.status_code == 400
        assert "keto" in response.json()["detail"]

    def test_unknown_budget_is_400(self, client):
        response = client.put("/preferences", json={"budget": "cheap"})
        assert response.status_code == 400

    def test_rejected_update_changes_nothing(self, client):
        """Test that a valid diet is not applied when the budget in the same request is invalid."""
        response = client.put("/preferences", json={"diet": ["vegetarian"], "budget": "$$$$"})
        assert response.status_code == 400
        assert client.get("/preferences").json() == {"diet": [], "budget": "$$"}

    def test_budget_level_out_of_range_is_422(self, client):
        response = client.put("/preferences", json={"budget_level": 5})
        assert response.status_code == 422

    def test_check_diet_tag(self, client):
        client.put("/preferences/diet/high-protein")
        response = client.put("/preferences/diet/vegetarian", params={"checked": True})
        assert response.status_code == 200
        assert response.json()["diet"] == ["vegetarian", "high-protein"]

    def test_uncheck_diet_tag(self, client):
        client.put("/preferences", json={"diet": ["vegetarian", "gluten-free"]})
        response = client.put("/preferences/diet/vegetarian", params={"checked": False})
        assert response.json() == {"diet": ["gluten-free"], "budget": "$$"}

    def test_check_unknown_diet_tag_is_400(self, client):
        response = client.put("/preferences/diet/keto")
        assert response.status_code == 400
        assert client.get("/preferences").json()["diet"] == []


class TestMealEndpoints:
    """Tests for /meals, /meals/shuffle and /memory."""

    def test_meals_empty_before_shuffle(self, client):
        response = client.get("/meals")
        assert response.status_code == 200
        assert response.json() == {"meals": {}}

    def test_shuffle_local_catalog(self, client):
        """Test a shuffle with no filters served entirely from the local catalog."""
        client.put("/preferences", json={"clear_budget": True})

        response = client.post("/meals/shuffle")

        assert response.status_code == 200
        meals = response.json()["meals"]
        assert list(meals) == list(MEAL_SLOTS)
        assert meals["lunch"]["name"] == "Chicken Salad"
        assert meals["lunch"]["source"] == "local"
        assert meals["lunch"]["meal_type"] == "lunch"
        assert client.get("/meals").json()["meals"] == meals

    def test_shuffle_falls_back_to_remote(self, client, remote):
        """Test that lunch with a vegetarian filter comes from the remote source."""
        client.put("/preferences", json={"diet": ["vegetarian"], "budget": "$"})

        meals = client.post("/meals/shuffle").json()["meals"]

        lunch = meals["lunch"]
        assert lunch["source"] == "remote"
        assert lunch["price_label"] == "$1.63 per serving"
        assert lunch["ingredients"] == ["1 tbsp butter"]
        assert meals["breakfast"]["name"] == "Oatmeal with Fruit"
        remote.fetch_random_recipe.assert_called_once_with("lunch", ["vegetarian"], "$")

    def test_unfilled_slots_are_omitted(self, client, remote):
        remote.fetch_random_recipe.return_value = None
        client.put("/preferences", json={"diet": ["high-protein"], "budget": "$$"})

        meals = client.post("/meals/shuffle").json()["meals"]

        assert list(meals) == ["lunch"]

    def test_memory_tracks_shuffles(self, client):
        client.put("/preferences", json={"clear_budget": True})
        meals = client.post("/meals/shuffle").json()["meals"]

        memory = client.get("/memory").json()

        assert memory["used_ids"] == [meals[slot]["id"] for slot in MEAL_SLOTS]
        assert memory["last_reset"] is not None


class TestInfoEndpoints:
    """Tests for / and /health."""

    def test_health(self):
        """Test that health reports config without building the planner."""
        with patch("api.main.get_planner") as get_planner, \
                patch("api.main.SpoonacularConfig.get_api_key", return_value="k"):
            data = TestClient(app).get("/health").json()

        assert data["status"] == "ok"
        assert data["remote_enabled"] is True
        assert data["config"] == {"spoonacular_api_key": True}
        get_planner.assert_not_called()

    def test_health_without_api_key(self):
        with patch("api.main.get_planner"), \
                patch("api.main.SpoonacularConfig.get_api_key", return_value=None):
            data = TestClient(app).get("/health").json()

        assert data["remote_enabled"] is False

    def test_root(self, client):
        data = client.get("/").json()
        assert data["name"] == "Daily Meal Randomizer API"
        assert data["docs"] == "/docs"


class TestBuildRemoteSource:
    """Tests for remote source wiring."""

    def test_missing_key_runs_local_only(self):
        with patch("api.main.SpoonacularConnector", side_effect=RuntimeError("SPOONACULAR_API_KEY is not set")):
            assert build_remote_source() is None

    def test_configured_key(self):
        with patch("api.main.SpoonacularConfig.get_api_key", return_value="k"):
            source = build_remote_source()
        assert source is not None
        assert source.api_key == "k"
