"""Backend selection with fixed-interval retry.

SimConnect is always tried first; FSUIPC/XPUIPC only when SimConnect cannot
be opened. Selection is terminal: once a source is returned it is used for
the rest of the process.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable

from ndpbridge._constants import DEFAULT_RETRY_INTERVAL
from ndpbridge.config import BridgeConfig
from ndpbridge.exceptions import BackendUnavailableError
from ndpbridge.models.sample import BackendKind
from ndpbridge.sources import PollSource, PushSource, TelemetrySource

_logger = logging.getLogger(__name__)

SourceOpener = Callable[[], Awaitable[TelemetrySource]]


class SelectionState(enum.Enum):
    NOT_CONNECTED = "not_connected"
    TRYING_PUSH = "trying_push"
    TRYING_POLL = "trying_poll"
    CONNECTED = "connected"


class BackendSelector:
    """Establishes exactly one telemetry source.

    Parameters
    ----------
    open_push, open_poll : callable
        Zero-argument coroutine factories that return an opened source or
        raise :class:`BackendUnavailableError`.
    retry_interval : float
        Constant delay between failed attempts. There is no backoff and no
        attempt limit.
    sleep : callable
        Awaitable sleep, injectable for tests.
    """

    def __init__(
        self,
        open_push: SourceOpener,
        open_poll: SourceOpener,
        *,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._open_push = open_push
        self._open_poll = open_poll
        self._retry_interval = retry_interval
        self._sleep = sleep
        self._state = SelectionState.NOT_CONNECTED

    @classmethod
    def from_config(cls, config: BridgeConfig) -> BackendSelector:
        """Selector wired to the real SimConnect and FSUIPC links."""
        return cls(
            lambda: PushSource.open(config),
            lambda: PollSource.open(config),
            retry_interval=config.retry_interval,
        )

    @property
    def state(self) -> SelectionState:
        return self._state

    async def attempt(self) -> TelemetrySource | None:
        """Run one push-then-poll pass. Returns ``None`` if both fail."""
        self._state = SelectionState.TRYING_PUSH
        try:
            source = await self._open_push()
        except BackendUnavailableError as push_exc:
            _logger.warning(
                "Could not open %s connection: %s. Trying %s instead...",
                BackendKind.SIMCONNECT.label,
                push_exc,
                BackendKind.FSUIPC.label,
            )
        else:
            self._state = SelectionState.CONNECTED
            return source

        self._state = SelectionState.TRYING_POLL
        try:
            source = await self._open_poll()
        except BackendUnavailableError as poll_exc:
            _logger.error("Could not open %s connection: %s", BackendKind.FSUIPC.label, poll_exc)
            self._state = SelectionState.NOT_CONNECTED
            return None

        self._state = SelectionState.CONNECTED
        return source

    async def select(self) -> TelemetrySource:
        """Retry :meth:`attempt` until a source opens."""
        while True:
            _logger.info("Trying to connect to simulator...")
            source = await self.attempt()
            if source is not None:
                _logger.info("Using %s backend", source.kind.label)
                return source
            await self._sleep(self._retry_interval)
