"""Fixed-cadence sampling and dispatch loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from pygeotrack.config import TrackingConfig
from pygeotrack.dispatcher import ReportDispatcher
from pygeotrack.exceptions import PositionUnavailableError, TickTimeoutError, TrackerError
from pygeotrack.interfaces import PositionSource
from pygeotrack.models.results import SampleResult, TickOutcome
from pygeotrack.models.session import SessionState, TrackingSession

_logger = logging.getLogger(__name__)


class TrackingLoop:
    """Samples the position source and dispatches a report every interval.

    Tick *k* is due at ``t0 + k * interval``.  Ticks run one after another
    in a single task, so they never overlap: a tick that overruns its slot
    delays the next one until it finishes.

    The stop event is checked before every tick.  Once set, no new tick
    starts; a tick already in progress runs to completion and its outcome
    is dropped.  :meth:`cancel` aborts the in-progress tick as well.
    """

    def __init__(
        self,
        position_source: PositionSource,
        dispatcher: ReportDispatcher,
        config: TrackingConfig,
        *,
        session: TrackingSession | None = None,
        stop_event: asyncio.Event | None = None,
        on_tick: Callable[[TickOutcome], None] | None = None,
    ) -> None:
        self._source = position_source
        self._dispatcher = dispatcher
        self._config = config
        self._session = session or TrackingSession(interval=config.interval, state=SessionState.RUNNING)
        self._stop_event = stop_event or asyncio.Event()
        self._on_tick = on_tick
        self._task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Schedule the loop on the running event loop."""
        if self._task is not None:
            raise TrackerError("Tracking loop already started")
        self._task = asyncio.create_task(self._run(), name="pygeotrack-loop")

    def stop(self) -> None:
        """Stop scheduling ticks.  Does not wait for an in-progress tick."""
        self._stop_event.set()

    def cancel(self) -> None:
        """Stop and abort any tick still in progress."""
        self._stop_event.set()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait_closed(self) -> None:
        """Wait until the loop task has exited."""
        if self._task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await self._task

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    @property
    def session(self) -> TrackingSession:
        return self._session

    @property
    def sequence_counter(self) -> int:
        """Counter the next tick will use."""
        return self._session.sequence_counter

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self._config.interval
        next_due = loop.time()
        _logger.info(
            "Tracking loop started (interval=%.1fs, tick_timeout=%.1fs)",
            interval,
            self._config.effective_tick_timeout,
        )
        try:
            while not self._stop_event.is_set():
                delay = next_due - loop.time()
                if delay > 0 and await self._wait_for_stop(delay):
                    break
                if self._stop_event.is_set():
                    break

                outcome = await self._tick()
                if self._stop_event.is_set():
                    _logger.debug("Dropping outcome of tick #%d: loop stopped mid-tick", outcome.counter)
                    break
                self._emit(outcome)

                next_due += interval
                now = loop.time()
                if next_due < now:
                    # Overran the slot: run the next tick right away and
                    # keep the cadence from there.
                    _logger.debug("Tick #%d overran its slot by %.3fs", outcome.counter, now - next_due)
                    next_due = now
        finally:
            _logger.info("Tracking loop exited after %d ticks", self._session.ticks_attempted)

    async def _wait_for_stop(self, delay: float) -> bool:
        """Sleep up to *delay* seconds; return ``True`` if stopped meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except TimeoutError:
            return False
        return True

    def _emit(self, outcome: TickOutcome) -> None:
        if self._on_tick is None:
            return
        try:
            self._on_tick(outcome)
        except Exception:
            _logger.warning("on_tick callback failed for tick #%d", outcome.counter, exc_info=True)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    async def _tick(self) -> TickOutcome:
        counter = self._session.sequence_counter
        timeout = self._config.effective_tick_timeout
        try:
            return await asyncio.wait_for(self._run_tick(counter), timeout=timeout)
        except TimeoutError:
            _logger.warning("Tick #%d timed out after %.1fs", counter, timeout)
            return TickOutcome(counter=counter, error=TickTimeoutError(f"Tick #{counter} exceeded {timeout}s"))
        except Exception as exc:
            _logger.error("Unexpected error in tick #%d", counter, exc_info=True)
            return TickOutcome(counter=counter, error=exc)
        finally:
            self._session.sequence_counter = counter + 1

    async def _run_tick(self, counter: int) -> TickOutcome:
        sample_result = await self._sample(counter)
        if sample_result.sample is None:
            return TickOutcome(counter=counter, sample=sample_result)

        delivery = await self._dispatcher.send(sample_result.sample, counter, self._config)
        return TickOutcome(counter=counter, sample=sample_result, delivery=delivery)

    async def _sample(self, counter: int) -> SampleResult:
        try:
            sample = await self._source.sample(self._config.accuracy_tier)
        except PositionUnavailableError as exc:
            _logger.warning("Tick #%d: position unavailable: %s", counter, exc)
            return SampleResult.failure(exc)
        _logger.debug("Tick #%d: sampled lat=%s long=%s", counter, sample.latitude, sample.longitude)
        return SampleResult.success(sample)
