"""Data models for location tracking."""

from pygeotrack.models.location import AccuracyTier, LocationSample
from pygeotrack.models.report import ReportRequest, TransportResponse
from pygeotrack.models.results import DeliveryResult, SampleResult, TickOutcome
from pygeotrack.models.session import SessionState, TrackingSession

__all__ = [
    "AccuracyTier",
    "DeliveryResult",
    "LocationSample",
    "ReportRequest",
    "SampleResult",
    "SessionState",
    "TickOutcome",
    "TrackingSession",
    "TransportResponse",
]
