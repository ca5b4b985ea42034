"""External stop command channel."""

from __future__ import annotations

import asyncio
import logging

_logger = logging.getLogger(__name__)


class StopChannel:
    """Delivers payload-less stop commands to a :class:`ServiceController`.

    The embedding application keeps a reference and calls :meth:`send`
    (from the event loop) or :meth:`send_threadsafe` (from a GUI thread or
    signal handler).  Commands sent before anyone listens are queued.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[None] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        """Remember the loop :meth:`send_threadsafe` should target."""
        self._loop = loop

    def send(self) -> None:
        self._queue.put_nowait(None)

    def send_threadsafe(self) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            _logger.debug("Stop signal dropped: channel is not bound to a running loop")
            return
        loop.call_soon_threadsafe(self.send)

    async def receive(self) -> None:
        """Wait for the next stop command."""
        await self._queue.get()

    @property
    def pending(self) -> int:
        return self._queue.qsize()
