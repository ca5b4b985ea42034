"""Collaborator interfaces supplied by the embedding application.

The platform-specific pieces (location provider, foreground-service
notification) live outside this library.  They are passed to
:class:`pygeotrack.controller.ServiceController` as objects matching
these protocols.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pygeotrack.models.location import AccuracyTier, LocationSample


@runtime_checkable
class PositionSource(Protocol):
    """Yields the device's current coordinates on demand."""

    async def sample(self, accuracy_tier: AccuracyTier) -> LocationSample:
        """Return a fresh fix.

        May suspend while the fix is acquired.  Raises
        :class:`pygeotrack.exceptions.PositionUnavailableError` when no fix
        can be obtained.
        """
        ...


@runtime_checkable
class PresenceIndicator(Protocol):
    """Persistent user-visible status indicator shown while tracking runs."""

    async def engage(self, title: str, description: str) -> None:
        """Post the indicator.

        Raises :class:`pygeotrack.exceptions.PermissionDeniedError` if the
        host refuses persistent background execution.
        """
        ...

    async def release(self) -> None:
        """Remove the indicator."""
        ...
