"""
Analytics Configuration

Loads report thresholds and the database location from
config/analytics.yaml, falling back to built-in defaults.
"""

from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, Field, model_validator

DEFAULT_CONFIG_PATH = Path("config/analytics.yaml")
DEFAULT_DB_PATH = Path("data/mifutbol.db")


class TierSettings(BaseModel):
    """Upper bounds of the Low and Medium tiers on the 1-10 scales."""

    low_max: int = 3
    medium_max: int = 7

    @model_validator(mode="after")
    def _check_order(self) -> "TierSettings":
        if not 1 <= self.low_max < self.medium_max < 10:
            raise ValueError(
                f"Tier bounds must satisfy 1 <= low_max < medium_max < 10, "
                f"got low_max={self.low_max}, medium_max={self.medium_max}"
            )
        return self


class AnalyticsSettings(BaseModel):
    """Settings shared by the analytics core and the report service."""

    database_path: Path = DEFAULT_DB_PATH
    tiers: TierSettings = Field(default_factory=TierSettings)

    # Fatigue above this is a demanding match
    high_fatigue_threshold: int = 7
    # Fatigue at or below this is an easy match
    easy_fatigue_max: int = 3

    outlier_multiplier: float = Field(default=1.5, gt=0)

    recent_window: int = Field(default=5, ge=1)
    trend_min_matches: int = Field(default=10, ge=2)
    trend_threshold: float = Field(default=0.5, ge=0)
    momentum_threshold: float = Field(default=0.5, ge=0)


def _read_yaml(config_path: Path) -> dict[str, Any]:
    """Read a YAML mapping, treating an empty file as no overrides."""
    with open(config_path) as f:
        data = yaml.safe_load(f)
    return data or {}


def load_settings(config_path: str | Path | None = None) -> AnalyticsSettings:
    """
    Load analytics settings from a YAML file.

    The file may either hold the settings at top level or under an
    ``analytics`` key.

    Args:
        config_path: Path to the settings file. Defaults to config/analytics.yaml

    Returns:
        Validated settings
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        logger.warning(f"Analytics config not found at {config_path}, using defaults")
        return AnalyticsSettings()

    data = _read_yaml(config_path)
    settings = AnalyticsSettings.model_validate(data.get("analytics", data))
    logger.debug(f"Loaded analytics settings from {config_path}")
    return settings
