"""Location sample model."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AccuracyTier(StrEnum):
    """Accuracy level requested from a position source."""

    LOWEST = "lowest"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    BEST = "best"


class LocationSample(BaseModel):
    """A single position reading.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    captured_at : datetime
        When the fix was taken (UTC).  Naive datetimes are assumed UTC.
    accuracy_tier : AccuracyTier
        Accuracy level the sample was requested with.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    captured_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    accuracy_tier: AccuracyTier = AccuracyTier.HIGH

    @field_validator("captured_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
