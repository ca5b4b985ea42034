"""Explicit per-step results of a tracking tick.

Failures inside a tick are values, not exceptions: the loop records the
error on the result and moves on.  Callers can inspect ``error`` to see
the exact failure kind.
"""

from __future__ import annotations

from dataclasses import dataclass

from pygeotrack.exceptions import DeliveryFailedError, TrackerError
from pygeotrack.models.location import LocationSample
from pygeotrack.models.report import ReportRequest, TransportResponse


@dataclass(frozen=True, slots=True)
class SampleResult:
    """Outcome of asking the position source for a fix."""

    sample: LocationSample | None = None
    error: TrackerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.sample is not None

    @classmethod
    def success(cls, sample: LocationSample) -> SampleResult:
        return cls(sample=sample)

    @classmethod
    def failure(cls, error: TrackerError) -> SampleResult:
        return cls(error=error)


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome of a single report submission."""

    counter: int
    request: ReportRequest
    response: TransportResponse | None = None
    error: DeliveryFailedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class TickOutcome:
    """Everything that happened during one tick.

    ``delivery`` is ``None`` when no report was built, either because
    sampling failed or because the tick was aborted (``error`` set).
    """

    counter: int
    sample: SampleResult | None = None
    delivery: DeliveryResult | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.sample is not None
            and self.sample.ok
            and self.delivery is not None
            and self.delivery.ok
        )

    @property
    def failure(self) -> Exception | None:
        """The first error encountered during the tick, if any."""
        if self.error is not None:
            return self.error
        if self.sample is not None and self.sample.error is not None:
            return self.sample.error
        if self.delivery is not None:
            return self.delivery.error
        return None
