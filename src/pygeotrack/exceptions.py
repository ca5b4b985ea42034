"""Custom exception hierarchy for pygeotrack."""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for all pygeotrack errors."""


class TrackerConfigError(TrackerError):
    """Invalid or missing configuration."""


class AlreadyRunningError(TrackerError):
    """``start`` was called while a tracking session is active.

    The running session is left untouched.
    """


class PositionUnavailableError(TrackerError):
    """The position source could not produce a fix.

    Typical causes are a revoked location permission or no satellite
    signal.  Contained within the tick that raised it.
    """


class TrackerTransportError(TrackerError):
    """HTTP-level failure raised by a transport."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class NetworkError(TrackerTransportError):
    """Connectivity loss or timeout while submitting a report."""


class DeliveryFailedError(TrackerError):
    """A report was not accepted by the collection endpoint.

    Covers non-2xx responses as well as transport failures (chained as
    ``__cause__``).  Reports are never retried.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class TickTimeoutError(TrackerError):
    """A tick did not finish within its time bound."""


class PermissionDeniedError(TrackerError):
    """The host refused persistent background execution.

    Raised by a presence indicator when it cannot be engaged.  This is
    the only error class that is surfaced to the embedding application;
    it ends (or prevents) the tracking session.
    """
