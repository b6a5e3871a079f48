"""FSUIPC/XPUIPC poll source.

Reads the four position offsets on a fixed timer. The next read only
happens once the consumer is done with the previous sample; ticks missed in
the meantime are dropped rather than queued.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Protocol

from ndpbridge._constants import DEFAULT_POLL_INTERVAL
from ndpbridge._fsuipc import FsuipcLink
from ndpbridge.config import BridgeConfig
from ndpbridge.models.sample import BackendKind, PollSample

_logger = logging.getLogger(__name__)


class OffsetLink(Protocol):
    def open(self) -> None:
        ...

    def read(self) -> tuple[int, int, int, int]:
        ...

    def close(self) -> None:
        ...


class PollSource:
    """Telemetry source backed by periodic FSUIPC offset reads."""

    kind = BackendKind.FSUIPC

    def __init__(self, link: OffsetLink, *, interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self._link = link
        self._interval = interval

    @classmethod
    async def open(cls, config: BridgeConfig, *, link: OffsetLink | None = None) -> PollSource:
        """Open the FSUIPC link off the event loop.

        Raises
        ------
        BackendUnavailableError
            If no FSUIPC/XPUIPC interface answers.
        """
        if link is None:
            link = FsuipcLink()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, link.open)
        _logger.info("Successfully connected to simulator (FSUIPC)")
        return cls(link, interval=config.poll_interval)

    async def samples(self) -> AsyncIterator[PollSample]:
        """Yield one sample per tick, first tick immediately."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            latitude, longitude, heading, altitude = self._link.read()
            yield PollSample(latitude=latitude, longitude=longitude, heading=heading, altitude=altitude)

            next_tick += self._interval
            now = loop.time()
            if now > next_tick:
                missed = int((now - next_tick) // self._interval) + 1
                _logger.debug("Skipping %d FSUIPC tick(s), previous report overran", missed)
                next_tick += missed * self._interval
            await asyncio.sleep(next_tick - now)

    def close(self) -> None:
        self._link.close()
