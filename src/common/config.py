"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"
DATA_EXPORTS_DIR = DATA_DIR / "exports"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class DatabaseSettings(BaseModel):
    """Database connection settings."""
    db_path: str = Field(
        default_factory=lambda: os.getenv(
            "DATABASE_PATH", str(DATA_DIR / "machinery_prices.db")
        )
    )

    @property
    def abs_path(self) -> Path:
        """Resolve database path relative to project root."""
        p = Path(self.db_path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p


class UseCaseSettings(BaseModel):
    """Blend ratios, search tolerances and sample caps for one suggestion type."""
    historical_weight: float = Field(default=0.6, ge=0, le=1)
    live_weight: float = Field(default=0.4, ge=0, le=1)
    year_tolerance: int = Field(default=3, ge=0)
    hours_tolerance: int = Field(default=2000, ge=0)
    historical_limit: int = Field(default=20, gt=0)
    live_limit: int = Field(default=10, gt=0)


def _default_use_cases() -> dict[str, UseCaseSettings]:
    return {
        "auction": UseCaseSettings(
            historical_weight=0.7, live_weight=0.3, hours_tolerance=2500
        ),
        "pvp": UseCaseSettings(),
        "repuestos": UseCaseSettings(),
    }


class ConfidenceSettings(BaseModel):
    """Sample-count thresholds for the confidence label."""
    high_total: int = Field(default=5, gt=0)
    live_medium: int = Field(default=3, gt=0)


class EstimatorSettings(BaseModel):
    """Tunables of the historical price estimator."""
    unknown_recency: Literal["max", "median"] = "max"
    min_margin_pct: float = 20.0
    confidence: ConfidenceSettings = Field(default_factory=ConfidenceSettings)
    use_cases: dict[str, UseCaseSettings] = Field(default_factory=_default_use_cases)

    @field_validator("use_cases", mode="before")
    @classmethod
    def _merge_use_case_defaults(cls, value):
        # Partial overrides keep the built-in values of the keys they omit
        if not isinstance(value, dict):
            return value
        merged = {name: s.model_dump() for name, s in _default_use_cases().items()}
        for name, overrides in value.items():
            if isinstance(overrides, UseCaseSettings):
                overrides = overrides.model_dump()
            merged[name] = {**merged.get(name, {}), **(overrides or {})}
        return merged

    def for_use_case(self, use_case: str) -> UseCaseSettings:
        """Settings for ``use_case``, falling back to the built-in defaults."""
        if use_case in self.use_cases:
            return self.use_cases[use_case]
        return _default_use_cases().get(use_case, UseCaseSettings())


class Settings(BaseModel):
    """Top-level application settings."""
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    estimator: EstimatorSettings = Field(default_factory=EstimatorSettings)

    @classmethod
    def load(cls, path: str | Path | None = None) -> Settings:
        """Load settings from a YAML file (default config/settings.yaml), falling back to defaults."""
        settings_path = Path(path) if path else CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


# Singleton settings instance
settings = Settings.load()
