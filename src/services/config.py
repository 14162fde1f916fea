"""
Loads and handles config from config.yml
Paths and log level can be overridden from .env / the environment
"""
import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.categories import Category

logger = logging.getLogger(__name__)

DEFAULT_LOCATIONS = ["Chennai", "Muscat", "Trichy"]
DEFAULT_HIDE_OLDER_THAN_HOURS = 60


class UpAheadSettings(BaseModel):
    """
    User-facing settings for the Up Ahead digest.
    Every field is optional; missing categories count as enabled.
    """
    model_config = ConfigDict(populate_by_name=True)

    categories: Dict[str, bool] = {}
    locations: List[str] = []
    hide_older_than_hours: float = Field(
        default=DEFAULT_HIDE_OLDER_THAN_HOURS, alias="hideOlderThanHours", gt=0
    )
    keywords: Dict[str, List[str]] = {}

    @field_validator("hide_older_than_hours", mode="before")
    @classmethod
    def _default_hours(cls, value):
        # 0 / null in the settings file means "use the default"
        return value or DEFAULT_HIDE_OLDER_THAN_HOURS

    @field_validator("keywords", mode="before")
    @classmethod
    def _drop_empty_keyword_lists(cls, value):
        if not value:
            return {}
        return {str(k).lower(): list(v or []) for k, v in value.items()}

    def is_enabled(self, category: Category | str) -> bool:
        if Category(category) == Category.GENERAL:
            return True
        return bool(self.categories.get(str(category), True))

    def enabled_categories(self) -> List[Category]:
        return [c for c in Category if c != Category.GENERAL and self.is_enabled(c)]

    @property
    def effective_locations(self) -> List[str]:
        cleaned = [loc.strip() for loc in self.locations if loc and loc.strip()]
        return cleaned or list(DEFAULT_LOCATIONS)


class Config(BaseModel):
    # Core
    DATABASE_PATH: str = "data/up_ahead.db"
    OUTPUT_DIR: str = "output"
    LOG_LEVEL: str = "INFO"

    # Fetching
    FETCH_CONCURRENCY: int = Field(default=8, ge=1)
    FETCH_TIMEOUT_SECONDS: float = Field(default=15.0, gt=0)
    SEARCH_WINDOW: str = "7d"

    # Planner store
    PLANNER_ENABLED: bool = True

    up_ahead: UpAheadSettings = UpAheadSettings()


def _bool(value: str | bool) -> bool:
    """Convert string or bool to boolean."""
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "yes", "on")


def _get_config_path() -> Optional[str]:
    """Get the path to config.yml, handling different working directories."""
    explicit = os.getenv("UPAHEAD_CONFIG")
    if explicit:
        return explicit

    # Try relative path first
    if os.path.exists("resources/config.yml"):
        return "resources/config.yml"

    # Try from project root
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    config_path = os.path.join(project_root, "resources", "config.yml")
    if os.path.exists(config_path):
        return config_path

    return None


def parse_settings(data: Optional[Dict[str, Any]]) -> UpAheadSettings:
    """Parse the up_ahead settings block from YAML (or any dict)."""
    return UpAheadSettings.model_validate(data or {})


def load_config(path: Optional[str] = None) -> Config:
    """Load configuration from config.yml and overrides from .env."""
    load_dotenv()

    config_path = path or _get_config_path()
    config: Dict[str, Any] = {}

    if config_path:
        with open(config_path, "r") as file:
            config = yaml.safe_load(file) or {}
    else:
        logger.warning("No resources/config.yml found, using defaults")

    return Config(
        DATABASE_PATH=os.getenv("UPAHEAD_DATABASE_PATH", config.get("DATABASE_PATH", "data/up_ahead.db")),
        OUTPUT_DIR=config.get("OUTPUT_DIR", "output"),
        LOG_LEVEL=os.getenv("UPAHEAD_LOG_LEVEL", config.get("LOG_LEVEL", "INFO")),

        FETCH_CONCURRENCY=int(config.get("FETCH_CONCURRENCY", 8)),
        FETCH_TIMEOUT_SECONDS=float(config.get("FETCH_TIMEOUT_SECONDS", 15)),
        SEARCH_WINDOW=str(config.get("SEARCH_WINDOW", "7d")),

        PLANNER_ENABLED=_bool(config.get("PLANNER_ENABLED", True)),

        up_ahead=parse_settings(config.get("up_ahead")),
    )
