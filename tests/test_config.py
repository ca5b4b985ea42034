from __future__ import annotations

import pytest

from pygeotrack.config import TrackingConfig
from pygeotrack.exceptions import TrackerConfigError
from pygeotrack.models.location import AccuracyTier

_REQUIRED_ENV = {
    "GEOTRACK_DRIVER_ID": "driver-7",
    "GEOTRACK_ORDER_ID": "order-99",
    "GEOTRACK_AUTH_TOKEN": "env-token",
    "GEOTRACK_ENDPOINT_URL": "https://collector.example/api/location",
}


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in (
        *_REQUIRED_ENV,
        "GEOTRACK_INTERVAL",
        "GEOTRACK_TICK_TIMEOUT",
        "GEOTRACK_REQUEST_TIMEOUT",
        "GEOTRACK_ACCURACY",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(config: TrackingConfig) -> None:
    default = TrackingConfig(
        driver_id=config.driver_id,
        order_id=config.order_id,
        auth_token=config.auth_token,
        endpoint_url=config.endpoint_url,
    )
    assert default.interval == 5.0
    assert default.effective_tick_timeout == 5.0
    assert default.accuracy_tier is AccuracyTier.HIGH


def test_repr_hides_token(config: TrackingConfig) -> None:
    assert "secret-token" not in repr(config)


@pytest.mark.parametrize(
    "overrides",
    [
        {"driver_id": "  "},
        {"order_id": ""},
        {"auth_token": ""},
        {"endpoint_url": "ftp://collector.example"},
        {"interval": 0},
        {"tick_timeout": -1.0},
        {"request_timeout": 0},
        {"accuracy_tier": "pinpoint"},
    ],
)
def test_invalid_values_are_rejected(overrides: dict[str, object]) -> None:
    kwargs: dict[str, object] = {
        "driver_id": "driver-7",
        "order_id": "order-99",
        "auth_token": "tok",
        "endpoint_url": "https://collector.example/api/location",
    }
    kwargs.update(overrides)
    with pytest.raises(TrackerConfigError):
        TrackingConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env_reads_all_fields(env: pytest.MonkeyPatch) -> None:
    for key, value in _REQUIRED_ENV.items():
        env.setenv(key, value)
    env.setenv("GEOTRACK_INTERVAL", "2.5")
    env.setenv("GEOTRACK_TICK_TIMEOUT", "1.5")
    env.setenv("GEOTRACK_ACCURACY", "best")

    config = TrackingConfig.from_env()

    assert config.driver_id == "driver-7"
    assert config.auth_token == "env-token"
    assert config.interval == 2.5
    assert config.effective_tick_timeout == 1.5
    assert config.accuracy_tier is AccuracyTier.BEST


def test_from_env_overrides_win(env: pytest.MonkeyPatch) -> None:
    for key, value in _REQUIRED_ENV.items():
        env.setenv(key, value)
    env.setenv("GEOTRACK_INTERVAL", "2.5")

    config = TrackingConfig.from_env(interval=10.0, order_id="order-1")

    assert config.interval == 10.0
    assert config.order_id == "order-1"


def test_from_env_missing_required(env: pytest.MonkeyPatch) -> None:
    env.setenv("GEOTRACK_DRIVER_ID", "driver-7")

    with pytest.raises(TrackerConfigError, match="order_id"):
        TrackingConfig.from_env()


def test_from_env_rejects_non_numeric_interval(env: pytest.MonkeyPatch) -> None:
    for key, value in _REQUIRED_ENV.items():
        env.setenv(key, value)
    env.setenv("GEOTRACK_INTERVAL", "fast")

    with pytest.raises(TrackerConfigError, match="GEOTRACK_INTERVAL"):
        TrackingConfig.from_env()
