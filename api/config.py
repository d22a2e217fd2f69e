"""
Configuration management for the Daily Meal Randomizer.

This module centralizes environment variable loading from the .env file at
project root. It should be imported early in the backend (api/main.py) so
.env is loaded before any other code reads environment variables.

In production .env will usually not exist; load_dotenv() is safe to call and
will no-op, and platform environment variables are used instead.

Environment Variables:
- SPOONACULAR_API_KEY: Required for the remote recipe fallback
- SPOONACULAR_BASE_URL: Optional, defaults to "https://api.spoonacular.com"
- SPOONACULAR_TIMEOUT_SECONDS: Optional, defaults to 10
- MEAL_MEMORY_FILE: Optional, JSON file for the used-recipe memory (default: used_recipes.json)
- LOG_LEVEL: Optional, defaults to INFO
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers configured by configure_logging()
APP_LOGGERS = ("meal_randomizer", "api")


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    Safe to call multiple times. Existing environment variables take precedence.
    """
    # api/config.py -> api/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env on module import
load_env_file()


class SpoonacularConfig:
    """Configuration for the Spoonacular remote recipe source."""

    @staticmethod
    def get_api_key() -> Optional[str]:
        """
        Get Spoonacular API key from environment.

        Returns:
            API key string or None if not set

        Note:
            This does not raise an error - the connector validates it.
        """
        return os.getenv("SPOONACULAR_API_KEY")

    @staticmethod
    def get_base_url() -> str:
        return os.getenv("SPOONACULAR_BASE_URL", "https://api.spoonacular.com")

    @staticmethod
    def get_timeout_seconds() -> float:
        """
        Get the request timeout for Spoonacular calls.

        Returns:
            Timeout in seconds (default: 10.0, also used when the value is not a number)
        """
        try:
            return float(os.getenv("SPOONACULAR_TIMEOUT_SECONDS", "10"))
        except ValueError:
            return 10.0


class MemoryConfig:
    """Configuration for the used-recipe memory store."""

    @staticmethod
    def get_memory_file() -> str:
        return os.getenv("MEAL_MEMORY_FILE", "used_recipes.json")


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a stdout handler to the application loggers.

    Safe to call multiple times; handlers are only added once.

    Args:
        level: Log level name (default: LOG_LEVEL env var or INFO)
    """
    level = (level or get_log_level()).upper()
    formatter = logging.Formatter(LOG_FORMAT)

    for name in APP_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(formatter)
            logger.addHandler(handler)


def get_required_env_vars() -> dict:
    """
    Get a dictionary of required environment variables and their status.

    Returns:
        Dictionary with keys:
        - spoonacular_api_key: bool (True if set)
    """
    return {
        "spoonacular_api_key": SpoonacularConfig.get_api_key() is not None,
    }

