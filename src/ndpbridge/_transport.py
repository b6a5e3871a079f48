"""HTTP transport for the charting service ingestion endpoint."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Protocol

import aiohttp

from ndpbridge._constants import USER_AGENT
from ndpbridge._redact import mask_form
from ndpbridge.exceptions import BridgeTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the reporter.

    Lets tests pass doubles while ``FormTransport`` stays concrete.
    """

    async def post_form(self, endpoint: str, form: Mapping[str, str]) -> None:
        ...


class FormTransport:
    """Posts ``application/x-www-form-urlencoded`` bodies to the service."""

    def __init__(self, base_url: str, http_session: aiohttp.ClientSession) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session

    async def post_form(self, endpoint: str, form: Mapping[str, str]) -> None:
        """POST *form* to *endpoint*; the response body is not interpreted.

        Raises
        ------
        BridgeTransportError
            On network failure, timeout or a non-2xx status.
        """
        url = f"{self._base_url}{endpoint}"
        headers = {"user-agent": USER_AGENT}

        _logger.debug("POST %s form=%s", url, mask_form(form))

        try:
            async with self._http.post(url, data=dict(form), headers=headers) as resp:
                if not 200 <= resp.status < 300:
                    text = await resp.text()
                    raise BridgeTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except BridgeTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise BridgeTransportError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise BridgeTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
