"""Tracking session state."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum


class SessionState(StrEnum):
    """Lifecycle states: ``stopped → starting → running → stopping → stopped``."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"

    @property
    def is_active(self) -> bool:
        """Whether the presence indicator must be engaged in this state."""
        return self in (SessionState.STARTING, SessionState.RUNNING)


@dataclass(slots=True)
class TrackingSession:
    """The single active run of the tracking loop.

    Parameters
    ----------
    interval : float
        Seconds between tick starts.
    state : SessionState
        Current lifecycle state.
    sequence_counter : int
        Counter handed to the next tick.  Starts at 1 and increments once
        per attempted tick.
    started_at : float
        Monotonic timestamp (``time.monotonic()``) of session creation.
    """

    interval: float
    state: SessionState = SessionState.STARTING
    sequence_counter: int = 1
    started_at: float = field(default_factory=time.monotonic)

    @property
    def age(self) -> float:
        """Seconds since the session was created."""
        return time.monotonic() - self.started_at

    @property
    def ticks_attempted(self) -> int:
        return self.sequence_counter - 1
