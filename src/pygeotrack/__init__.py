"""pygeotrack - Async background location reporting agent."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygeotrack")
except PackageNotFoundError:
    __version__ = "0+local"
from pygeotrack._transport import AiohttpTransport, Transport
from pygeotrack.config import TrackingConfig
from pygeotrack.controller import ServiceController
from pygeotrack.dispatcher import ReportDispatcher, build_report_request
from pygeotrack.exceptions import (
    AlreadyRunningError,
    DeliveryFailedError,
    NetworkError,
    PermissionDeniedError,
    PositionUnavailableError,
    TickTimeoutError,
    TrackerConfigError,
    TrackerError,
    TrackerTransportError,
)
from pygeotrack.interfaces import PositionSource, PresenceIndicator
from pygeotrack.loop import TrackingLoop
from pygeotrack.models import (
    AccuracyTier,
    DeliveryResult,
    LocationSample,
    ReportRequest,
    SampleResult,
    SessionState,
    TickOutcome,
    TrackingSession,
    TransportResponse,
)
from pygeotrack.signals import StopChannel

__all__ = [
    "__version__",
    "AccuracyTier",
    "AiohttpTransport",
    "AlreadyRunningError",
    "DeliveryFailedError",
    "DeliveryResult",
    "LocationSample",
    "NetworkError",
    "PermissionDeniedError",
    "PositionSource",
    "PositionUnavailableError",
    "PresenceIndicator",
    "ReportDispatcher",
    "ReportRequest",
    "SampleResult",
    "ServiceController",
    "SessionState",
    "StopChannel",
    "TickOutcome",
    "TickTimeoutError",
    "TrackerConfigError",
    "TrackerError",
    "TrackerTransportError",
    "TrackingConfig",
    "TrackingLoop",
    "TrackingSession",
    "Transport",
    "TransportResponse",
    "build_report_request",
]
