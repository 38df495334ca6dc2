"""Metric models.

A metric is a single named observation produced during training:
- Immutable once built (the recorder only ever appends).
- Carries an optional unit so readers can agree on scale (e.g. "ns").
- Timestamped at creation unless the producer supplies its own time.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(tz=timezone.utc)


class Metric(BaseModel):
    """A single observation belonging to a named series."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Series key (e.g., "train", "forward", "train_Accuracy").
    name: str

    # Ints stay ints so nanosecond timings keep full precision.
    value: int | float

    # Free-form unit label; timing series use "ns" by convention.
    unit: str | None = None

    timestamp: datetime = Field(default_factory=utc_now)
