"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting environment variables into strongly-typed Pydantic models.
- Validating values and providing actionable error messages.
"""

import logging
import os
from pathlib import Path

import dotenv
from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _get_env_str(name: str, default: str) -> str:
    """Read a string env var with a default (blank counts as unset)."""
    value = os.getenv(name, "").strip()
    return value or default


def _get_env_bool(name: str, default: bool) -> bool:
    """Read a boolean env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    normalized = raw.strip().lower()
    if normalized in {"true", "1", "yes", "y", "on"}:
        return True
    if normalized in {"false", "0", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean (true/false). Got: {raw!r}")


def _get_env_path(name: str) -> Path | None:
    """Read an optional filesystem path env var."""
    raw = os.getenv(name, "").strip()
    return Path(raw) if raw else None


class ReportingConfig(BaseModel):
    """How training progress is reported to the console."""

    log_level: str = Field(default="INFO", description="Root logging level")
    progress_bar: bool = Field(default=True, description="Render progress bars")

    @property
    def log_level_value(self) -> int:
        """Numeric `logging` level for `log_level`."""
        return logging.getLevelName(self.log_level)

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        normalized = v.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"TRAINING_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}. Got: {v!r}")
        return normalized


class MetricsConfig(BaseModel):
    """Where (if anywhere) a run's metrics are persisted."""

    db_path: Path | None = Field(default=None, description="DuckDB file to export metrics into")
    table: str = Field(default="training_metrics", description="DuckDB table name")

    @field_validator("table")
    def validate_table(cls, v: str) -> str:
        """Table names are interpolated into SQL, so only plain identifiers are allowed."""
        if not v.isidentifier():
            raise ValueError(f"TRAINING_METRICS_TABLE must be a plain identifier. Got: {v!r}")
        return v


class Config(BaseModel):
    """Top-level application configuration."""

    reporting: ReportingConfig = Field(default_factory=ReportingConfig, description="Reporting configuration")
    metrics: MetricsConfig = Field(default_factory=MetricsConfig, description="Metrics configuration")


def load_config() -> Config:
    """Load application configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Raises `ValueError` with actionable messages when a value cannot be parsed.
    """
    dotenv.load_dotenv()

    reporting = ReportingConfig(
        log_level=_get_env_str("TRAINING_LOG_LEVEL", "INFO"),
        progress_bar=_get_env_bool("TRAINING_PROGRESS_BAR", True),
    )
    metrics = MetricsConfig(
        db_path=_get_env_path("TRAINING_METRICS_DB_PATH"),
        table=_get_env_str("TRAINING_METRICS_TABLE", "training_metrics"),
    )
    return Config(reporting=reporting, metrics=metrics)
