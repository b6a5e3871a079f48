"""SimConnect push source.

The simulator pushes the position block whenever it changes (at most once
per second). This source only drains the message queue on a short interval
and decodes what arrived; it has no sampling cadence of its own.
"""

from __future__ import annotations

import asyncio
import logging
import struct
from collections.abc import AsyncIterator
from typing import Protocol

from ndpbridge._constants import (
    DEFAULT_DISPATCH_INTERVAL,
    SIMCONNECT_RECV_ID_EXCEPTION,
    SIMCONNECT_RECV_ID_OPEN,
    SIMCONNECT_RECV_ID_QUIT,
    SIMCONNECT_RECV_ID_SIMOBJECT_DATA,
)
from ndpbridge._simconnect import SimConnectLink, SimConnectMessage
from ndpbridge.config import BridgeConfig
from ndpbridge.models.sample import BackendKind, PushSample

_logger = logging.getLogger(__name__)

#: latitude, longitude, heading, altitude as packed FLOAT64
POSITION_PAYLOAD = struct.Struct("<4d")


class SimObjectLink(Protocol):
    def open(self) -> None:
        ...

    def dispatch(self) -> list[SimConnectMessage]:
        ...

    def close(self) -> None:
        ...


def decode_position_payload(payload: bytes) -> PushSample:
    """Decode the fixed-layout SimConnect position block."""
    latitude, longitude, heading, altitude = POSITION_PAYLOAD.unpack_from(payload)
    return PushSample(latitude=latitude, longitude=longitude, heading=heading, altitude=altitude)


class PushSource:
    """Telemetry source backed by a SimConnect data subscription."""

    kind = BackendKind.SIMCONNECT

    def __init__(self, link: SimObjectLink, *, dispatch_interval: float = DEFAULT_DISPATCH_INTERVAL) -> None:
        self._link = link
        self._dispatch_interval = dispatch_interval

    @classmethod
    async def open(cls, config: BridgeConfig, *, link: SimObjectLink | None = None) -> PushSource:
        """Open the SimConnect link off the event loop.

        Raises
        ------
        BackendUnavailableError
            If SimConnect cannot be reached.
        """
        if link is None:
            link = SimConnectLink(config.simconnect_app_name)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, link.open)
        return cls(link, dispatch_interval=config.dispatch_interval)

    def _handle(self, message: SimConnectMessage) -> PushSample | None:
        if message.recv_id == SIMCONNECT_RECV_ID_SIMOBJECT_DATA:
            return decode_position_payload(message.payload)
        if message.recv_id == SIMCONNECT_RECV_ID_OPEN:
            _logger.info("Successfully connected to simulator (SimConnect)")
        elif message.recv_id == SIMCONNECT_RECV_ID_QUIT:
            _logger.warning("Simulator closed the SimConnect connection")
        elif message.recv_id == SIMCONNECT_RECV_ID_EXCEPTION:
            code = int.from_bytes(message.payload, "little") if message.payload else None
            _logger.warning("SimConnect exception code=%s", code)
        else:
            _logger.debug("Ignoring SimConnect message id=%s", message.recv_id)
        return None

    async def samples(self) -> AsyncIterator[PushSample]:
        """Yield position samples as the simulator pushes them."""
        while True:
            for message in self._link.dispatch():
                sample = self._handle(message)
                if sample is not None:
                    yield sample
            await asyncio.sleep(self._dispatch_interval)

    def close(self) -> None:
        self._link.close()
