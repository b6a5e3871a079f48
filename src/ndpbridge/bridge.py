"""Top-level telemetry bridge: session, backend, and reporting loop."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from ndpbridge._transport import FormTransport
from ndpbridge.config import BridgeConfig
from ndpbridge.exceptions import BridgeError
from ndpbridge.ingestion.normalize import normalize
from ndpbridge.reporter import Reporter
from ndpbridge.selector import BackendSelector
from ndpbridge.session import Session, resolve_session
from ndpbridge.sources import TelemetrySource

_logger = logging.getLogger(__name__)


class TelemetryBridge:
    """Relays simulator position to the NDP charting service.

    Usage::

        async with TelemetryBridge(config) as bridge:
            await bridge.run()
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        selector: BackendSelector | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._selector = selector or BackendSelector.from_config(config)
        self._reporter: Reporter | None = None
        self._source: TelemetrySource | None = None

    async def __aenter__(self) -> TelemetryBridge:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._reporter = Reporter(FormTransport(self._config.base_url, self._http_session))
        return self

    async def __aexit__(self, *exc: Any) -> None:
        source = self._source
        self._source = None
        if source is not None:
            source.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._reporter = None

    @property
    def source(self) -> TelemetrySource | None:
        """The active source, once selection has finished."""
        return self._source

    def _require_reporter(self) -> Reporter:
        if self._reporter is None:
            raise BridgeError("Bridge not initialized. Use 'async with TelemetryBridge(...) as bridge:'")
        return self._reporter

    async def run(self) -> None:
        """Resolve the session, pick a backend, then report forever.

        Raises
        ------
        SessionError
            Before any backend is touched, if no session is available.
        """
        reporter = self._require_reporter()
        session = resolve_session(self._config.settings_path)
        self._source = await self._selector.select()
        await self._pump(self._source, session, reporter)

    async def _pump(self, source: TelemetrySource, session: Session, reporter: Reporter) -> None:
        async for raw in source.samples():
            await reporter.report(session, normalize(raw))
