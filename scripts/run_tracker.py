#!/usr/bin/env python3
"""Run the tracking agent from a terminal.

Reads ``GEOTRACK_*`` environment variables for the session configuration
and reports a fixed coordinate (given on the command line) every interval.
The "presence indicator" is a log line.  Ctrl+C or SIGTERM sends a stop
command through the stop channel.

Example::

    GEOTRACK_DRIVER_ID=42 GEOTRACK_ORDER_ID=1001 GEOTRACK_AUTH_TOKEN=... \\
    GEOTRACK_ENDPOINT_URL=https://example.test/api/location \\
        python scripts/run_tracker.py --lat 52.37 --long 4.89 --duration 30
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from datetime import UTC, datetime
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pygeotrack import (  # noqa: E402
    AccuracyTier,
    AiohttpTransport,
    LocationSample,
    ServiceController,
    StopChannel,
    TickOutcome,
    TrackerError,
    TrackingConfig,
)

_LOG = logging.getLogger("run_tracker")


class FixedPositionSource:
    def __init__(self, latitude: float, longitude: float) -> None:
        self._latitude = latitude
        self._longitude = longitude

    async def sample(self, accuracy_tier: AccuracyTier) -> LocationSample:
        return LocationSample(
            latitude=self._latitude,
            longitude=self._longitude,
            captured_at=datetime.now(UTC),
            accuracy_tier=accuracy_tier,
        )


class LogPresenceIndicator:
    async def engage(self, title: str, description: str) -> None:
        _LOG.info("[indicator] %s - %s", title, description)

    async def release(self) -> None:
        _LOG.info("[indicator] released")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report a fixed location until stopped.")
    parser.add_argument("--lat", type=float, required=True, help="Latitude in degrees.")
    parser.add_argument("--long", dest="lon", type=float, required=True, help="Longitude in degrees.")
    parser.add_argument("--interval", type=float, default=None, help="Override GEOTRACK_INTERVAL (seconds).")
    parser.add_argument(
        "--duration",
        type=float,
        default=0,
        help="Send a stop command after N seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logs.")
    return parser.parse_args()


def _print_outcome(outcome: TickOutcome) -> None:
    if outcome.ok:
        print(f"[tracker] #{outcome.counter} delivered")
    else:
        print(f"[tracker] #{outcome.counter} failed: {outcome.failure}")


async def run(args: argparse.Namespace) -> int:
    overrides = {"interval": args.interval} if args.interval is not None else {}
    try:
        config = TrackingConfig.from_env(**overrides)
    except TrackerError as exc:
        print(f"[tracker] Invalid configuration: {exc}", file=sys.stderr)
        return 2

    channel = StopChannel()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, channel.send)

    async with AiohttpTransport(request_timeout=config.request_timeout) as transport:
        controller = ServiceController(
            FixedPositionSource(args.lat, args.lon),
            transport,
            LogPresenceIndicator(),
            stop_channel=channel,
            on_tick=_print_outcome,
        )
        async with controller:
            try:
                await controller.start(config)
            except TrackerError as exc:
                print(f"[tracker] Could not start: {exc}", file=sys.stderr)
                return 1

            if args.duration > 0:
                loop.call_later(args.duration, channel.send)

            while controller.state.is_active:
                await asyncio.sleep(0.2)

    return 0


def main() -> None:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
