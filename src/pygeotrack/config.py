"""Tracking session configuration."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pygeotrack._constants import (
    DEFAULT_INDICATOR_DESCRIPTION,
    DEFAULT_INDICATOR_TITLE,
    DEFAULT_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
)
from pygeotrack.exceptions import TrackerConfigError
from pygeotrack.models.location import AccuracyTier


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise TrackerConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class TrackingConfig:
    """Configuration bound to one tracking session.

    Parameters
    ----------
    driver_id : str
        Opaque driver identifier sent with every report.
    order_id : str
        Opaque order identifier sent with every report.
    auth_token : str
        Bearer token for the ``Authorization`` header.
    endpoint_url : str
        Full URL of the collection endpoint.
    interval : float
        Seconds between tick starts.  Defaults to 5 seconds.
    accuracy_tier : AccuracyTier
        Accuracy level requested from the position source.
    tick_timeout : float or None
        Upper bound for one tick (sample + send) in seconds.  ``None``
        uses ``interval``.
    request_timeout : float
        Per-request timeout used by the aiohttp transport.
    indicator_title : str
        Title of the persistent status indicator.
    indicator_description : str
        Body text of the persistent status indicator.
    """

    driver_id: str
    order_id: str
    auth_token: str = dataclasses.field(repr=False)
    endpoint_url: str
    interval: float = DEFAULT_INTERVAL
    accuracy_tier: AccuracyTier = AccuracyTier.HIGH
    tick_timeout: float | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    indicator_title: str = DEFAULT_INDICATOR_TITLE
    indicator_description: str = DEFAULT_INDICATOR_DESCRIPTION

    def __post_init__(self) -> None:
        for name in ("driver_id", "order_id", "auth_token"):
            if not str(getattr(self, name)).strip():
                raise TrackerConfigError(f"{name} must be non-empty")
        if not self.endpoint_url.startswith(("http://", "https://")):
            raise TrackerConfigError(f"endpoint_url must be an http(s) URL, got {self.endpoint_url!r}")
        if self.interval <= 0:
            raise TrackerConfigError(f"interval must be positive, got {self.interval}")
        if self.tick_timeout is not None and self.tick_timeout <= 0:
            raise TrackerConfigError(f"tick_timeout must be positive, got {self.tick_timeout}")
        if self.request_timeout <= 0:
            raise TrackerConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        # Accept plain strings such as "best" from env or callers.
        try:
            tier = AccuracyTier(self.accuracy_tier)
        except ValueError as exc:
            raise TrackerConfigError(f"unknown accuracy_tier {self.accuracy_tier!r}") from exc
        object.__setattr__(self, "accuracy_tier", tier)

    @property
    def effective_tick_timeout(self) -> float:
        return self.tick_timeout if self.tick_timeout is not None else self.interval

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackingConfig:
        """Create configuration from ``GEOTRACK_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        TrackerConfigError
            If a required value is missing or a value is malformed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "GEOTRACK_DRIVER_ID": "driver_id",
            "GEOTRACK_ORDER_ID": "order_id",
            "GEOTRACK_AUTH_TOKEN": "auth_token",
            "GEOTRACK_ENDPOINT_URL": "endpoint_url",
            "GEOTRACK_ACCURACY": "accuracy_tier",
            "GEOTRACK_INDICATOR_TITLE": "indicator_title",
            "GEOTRACK_INDICATOR_DESCRIPTION": "indicator_description",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields, handled separately
        _ENV_FLOAT_MAP = {
            "GEOTRACK_INTERVAL": "interval",
            "GEOTRACK_TICK_TIMEOUT": "tick_timeout",
            "GEOTRACK_REQUEST_TIMEOUT": "request_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        config_kwargs.update(overrides)

        missing = [f for f in ("driver_id", "order_id", "auth_token", "endpoint_url") if f not in config_kwargs]
        if missing:
            raise TrackerConfigError(f"Missing configuration: {', '.join(missing)}")

        return cls(**config_kwargs)
