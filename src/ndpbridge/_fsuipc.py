"""Internal FSUIPC/XPUIPC link built on the ``fsuipc`` bindings."""

from __future__ import annotations

import logging
from typing import Any

from ndpbridge._constants import (
    FSUIPC_OFFSET_ALTITUDE,
    FSUIPC_OFFSET_HEADING,
    FSUIPC_OFFSET_LATITUDE,
    FSUIPC_OFFSET_LONGITUDE,
)
from ndpbridge.exceptions import BackendUnavailableError

_logger = logging.getLogger(__name__)

# read() returns values in this order
_POSITION_OFFSETS = [
    FSUIPC_OFFSET_LATITUDE,
    FSUIPC_OFFSET_LONGITUDE,
    FSUIPC_OFFSET_HEADING,
    FSUIPC_OFFSET_ALTITUDE,
]


def _close_quietly(fsuipc: Any) -> None:
    try:
        fsuipc.close()
    except Exception:
        _logger.debug("FSUIPC close failed after an aborted open", exc_info=True)


class FsuipcLink:
    """Synchronous reader for the four position offsets."""

    def __init__(self) -> None:
        self._fsuipc: Any = None
        self._prepared: Any = None

    def open(self) -> None:
        """Connect to FSUIPC/XPUIPC and prepare the offset block.

        Raises
        ------
        BackendUnavailableError
            If the bindings are missing or no simulator interface answers.
        """
        fsuipc: Any = None
        try:
            # Windows-only binding; import deferred to connection time.
            from fsuipc import FSUIPC

            fsuipc = FSUIPC()
            prepared = fsuipc.prepare_data(_POSITION_OFFSETS, True)
        except Exception as exc:
            if fsuipc is not None:
                _close_quietly(fsuipc)
            raise BackendUnavailableError(
                f"Could not open FSUIPC/XPUIPC connection: {exc}",
                backend="fsuipc",
            ) from exc
        self._fsuipc = fsuipc
        self._prepared = prepared
        _logger.debug("FSUIPC link opened offsets=%s", [hex(address) for address, _ in _POSITION_OFFSETS])

    def read(self) -> tuple[int, int, int, int]:
        """Refresh and return ``(latitude, longitude, heading, altitude)`` raw values."""
        latitude, longitude, heading, altitude = self._prepared.read()
        return int(latitude), int(longitude), int(heading), int(altitude)

    def close(self) -> None:
        fsuipc = self._fsuipc
        self._fsuipc = None
        self._prepared = None
        if fsuipc is None:
            return
        fsuipc.close()
        _logger.debug("FSUIPC link closed")
