"""Run/stop lifecycle of the background tracking agent."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

from pygeotrack._transport import Transport
from pygeotrack.config import TrackingConfig
from pygeotrack.dispatcher import ReportDispatcher
from pygeotrack.exceptions import AlreadyRunningError, PermissionDeniedError, TrackerError
from pygeotrack.interfaces import PositionSource, PresenceIndicator
from pygeotrack.loop import TrackingLoop
from pygeotrack.models.results import TickOutcome
from pygeotrack.models.session import SessionState, TrackingSession
from pygeotrack.signals import StopChannel

_logger = logging.getLogger(__name__)


class ServiceController:
    """Owns the tracking session and its presence indicator.

    Usage::

        async with ServiceController(source, transport, indicator, stop_channel=channel) as controller:
            await controller.start(config)
            ...
            channel.send()  # or: await controller.stop()

    The platform's background-execution callback should simply delegate
    to :meth:`start`.  The presence indicator is engaged exactly once per
    session start and released exactly once per session stop.
    """

    def __init__(
        self,
        position_source: PositionSource,
        transport: Transport,
        presence_indicator: PresenceIndicator,
        *,
        stop_channel: StopChannel | None = None,
        on_tick: Callable[[TickOutcome], None] | None = None,
        on_error: Callable[[TrackerError], None] | None = None,
    ) -> None:
        self._source = position_source
        self._dispatcher = ReportDispatcher(transport)
        self._presence = presence_indicator
        self._stop_channel = stop_channel or StopChannel()
        self._on_tick_cb = on_tick
        self._on_error_cb = on_error
        self._session: TrackingSession | None = None
        self._loop: TrackingLoop | None = None
        self._draining: set[TrackingLoop] = set()
        self._listener: asyncio.Task[None] | None = None
        self._last_outcome: TickOutcome | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ServiceController:
        await self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def open(self) -> None:
        """Start listening on the stop channel."""
        if self._listener is not None and not self._listener.done():
            return
        self._stop_channel.bind(asyncio.get_running_loop())
        self._listener = asyncio.create_task(self._listen_for_stop(), name="pygeotrack-stop-listener")

    async def aclose(self) -> None:
        """Stop the session, the stop listener and any tick still in flight."""
        await self.stop()

        listener = self._listener
        self._listener = None
        if listener is not None:
            listener.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await listener

        for loop in list(self._draining):
            loop.cancel()
            await loop.wait_closed()
        self._draining.clear()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.STOPPED
        return self._session.state

    @property
    def session(self) -> TrackingSession | None:
        return self._session

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def stop_channel(self) -> StopChannel:
        return self._stop_channel

    @property
    def last_outcome(self) -> TickOutcome | None:
        """Outcome of the most recent completed tick in any session."""
        return self._last_outcome

    # ------------------------------------------------------------------
    # Start / stop
    # ------------------------------------------------------------------

    async def start(self, config: TrackingConfig) -> TrackingSession:
        """Start a tracking session bound to *config*.

        Also starts the stop listener if :meth:`open` was not called yet;
        :meth:`aclose` tears it down again.

        Raises
        ------
        AlreadyRunningError
            If a session is already starting, running or stopping.
        PermissionDeniedError
            If the presence indicator could not be engaged.  The
            controller is back in ``stopped`` state.
        """
        if self._session is not None:
            raise AlreadyRunningError(f"Tracking session is already {self._session.state}")

        # Hosts may call start() directly without entering the context manager.
        await self.open()

        session = TrackingSession(interval=config.interval)
        self._session = session
        _logger.info(
            "Starting tracking session (driver=%s, order=%s, interval=%.1fs)",
            config.driver_id,
            config.order_id,
            config.interval,
        )

        try:
            await self._presence.engage(config.indicator_title, config.indicator_description)
        except BaseException as exc:
            session.state = SessionState.STOPPED
            self._session = None
            if isinstance(exc, PermissionDeniedError):
                _logger.error("Presence indicator refused, session not started: %s", exc)
                self._report_error(exc)
            raise

        if session.state is SessionState.STOPPING:
            # stop() arrived while the indicator was being engaged.
            await self._finish_stop(session)
            return session

        session.state = SessionState.RUNNING
        loop = TrackingLoop(
            self._source,
            self._dispatcher,
            config,
            session=session,
            on_tick=self._on_tick,
        )
        self._loop = loop
        loop.start()
        _logger.info("Tracking session running")
        return session

    async def stop(self) -> None:
        """Stop the active session.  No-op when already stopped.

        No further ticks are scheduled once this is called.  A tick that is
        already in flight finishes in the background and its outcome is
        dropped.
        """
        session = self._session
        if session is None or session.state is SessionState.STOPPING:
            return

        if session.state is SessionState.STARTING:
            # start() releases the indicator once engage() returns.
            session.state = SessionState.STOPPING
            _logger.info("Stop requested while starting")
            return

        session.state = SessionState.STOPPING
        loop = self._loop
        self._loop = None
        if loop is not None:
            loop.stop()
            self._track_draining(loop)

        await self._finish_stop(session)

    async def handle_presence_denied(self, error: PermissionDeniedError) -> None:
        """Force-stop after the host revoked the presence indicator mid-session."""
        if self._session is None:
            return
        _logger.error("Presence indicator revoked, stopping session: %s", error)
        await self.stop()
        self._report_error(error)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _finish_stop(self, session: TrackingSession) -> None:
        try:
            await self._presence.release()
        except Exception:
            _logger.warning("Presence indicator release failed", exc_info=True)
        finally:
            session.state = SessionState.STOPPED
            if self._session is session:
                self._session = None
        _logger.info("Tracking session stopped after %d ticks", session.ticks_attempted)

    def _track_draining(self, loop: TrackingLoop) -> None:
        task = loop.task
        if task is None or task.done():
            return
        self._draining.add(loop)
        task.add_done_callback(lambda _task: self._draining.discard(loop))

    async def _listen_for_stop(self) -> None:
        while True:
            await self._stop_channel.receive()
            if self._session is None:
                _logger.debug("Stop signal ignored: no active session")
                continue
            _logger.info("Stop signal received")
            await self.stop()

    def _on_tick(self, outcome: TickOutcome) -> None:
        self._last_outcome = outcome
        if self._on_tick_cb is not None:
            self._on_tick_cb(outcome)

    def _report_error(self, error: TrackerError) -> None:
        if self._on_error_cb is None:
            return
        try:
            self._on_error_cb(error)
        except Exception:
            _logger.warning("on_error callback failed", exc_info=True)
