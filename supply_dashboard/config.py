"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``SUPPLY_DASHBOARD_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI, the insight service and the dashboard all receive an ``AppConfig``
instance, never raw dicts or individual env var lookups.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DatabaseConfig(BaseModel):
    """SQLite database connection settings."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/supply_dashboard.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class ForecastConfig(BaseModel):
    """Moving-average window and confidence curve settings."""

    model_config = ConfigDict(frozen=True)

    window: int = 7
    confidence_scale: float = 20.0

    @field_validator("window")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"window must be >= 1, got {v}.")
        return v

    @field_validator("confidence_scale")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"confidence_scale must be positive, got {v}.")
        return v


class ThresholdsConfig(BaseModel):
    """Days-of-stock boundaries for the stock-health ladder."""

    model_config = ConfigDict(frozen=True)

    low_days: float = 7
    adequate_days: float = 14
    high_days: float = 30

    @model_validator(mode="after")
    def validate_ordering(self) -> "ThresholdsConfig":
        if not 0 < self.low_days < self.adequate_days <= self.high_days:
            raise ValueError(
                "thresholds must satisfy 0 < low_days < adequate_days <= high_days, "
                f"got {self.low_days}, {self.adequate_days}, {self.high_days}."
            )
        return self


class DashboardConfig(BaseModel):
    """Refresh cadence and chart settings for the dashboard and ``watch``."""

    model_config = ConfigDict(frozen=True)

    refresh_seconds: int = 60
    trend_days: int = 14

    @field_validator("refresh_seconds")
    @classmethod
    def validate_refresh(cls, v: int) -> int:
        if v < 5:
            raise ValueError(f"refresh_seconds must be >= 5, got {v}.")
        return v


class OutputConfig(BaseModel):
    """Where exported insight reports are written."""

    model_config = ConfigDict(frozen=True)

    report_dir: str = "data/outputs/insights"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/supply_dashboard.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    forecast: ForecastConfig = ForecastConfig()
    thresholds: ThresholdsConfig = ThresholdsConfig()
    dashboard: DashboardConfig = DashboardConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply SUPPLY_DASHBOARD_* env vars to the raw config dict.

    Supported overrides:
      SUPPLY_DASHBOARD_DB_PATH    → raw["database"]["db_path"]
      SUPPLY_DASHBOARD_LOG_LEVEL  → raw["logging"]["level"]
      SUPPLY_DASHBOARD_DEBUG      → raw["debug"]
    """
    if db_path := os.environ.get("SUPPLY_DASHBOARD_DB_PATH"):
        raw.setdefault("database", {})["db_path"] = db_path

    if log_level := os.environ.get("SUPPLY_DASHBOARD_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("SUPPLY_DASHBOARD_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        database=DatabaseConfig(**raw.get("database", {})),
        forecast=ForecastConfig(**raw.get("forecast", {})),
        thresholds=ThresholdsConfig(**raw.get("thresholds", {})),
        dashboard=DashboardConfig(**raw.get("dashboard", {})),
        output=OutputConfig(**raw.get("output", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
