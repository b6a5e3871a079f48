"""Internal SimConnect link built on the Python-SimConnect bindings.

Only the DLL loader and handle of :class:`SimConnect.SimConnect` are used;
the subscription and the dispatch loop are driven here so that messages are
drained on the caller's schedule rather than on the library's own thread.
"""

from __future__ import annotations

import ctypes
import logging
from dataclasses import dataclass
from typing import Any

from ndpbridge._constants import (
    SIMCONNECT_DATA_REQUEST_FLAG_CHANGED,
    SIMCONNECT_DATATYPE_FLOAT64,
    SIMCONNECT_OBJECT_ID_USER,
    SIMCONNECT_PERIOD_SECOND,
    SIMCONNECT_POSITION_VARS,
    SIMCONNECT_RECV_ID_EXCEPTION,
    SIMCONNECT_RECV_ID_SIMOBJECT_DATA,
    SIMCONNECT_UNUSED,
)
from ndpbridge.exceptions import BackendUnavailableError

_logger = logging.getLogger(__name__)

# SIMCONNECT_RECV header: dwSize, dwVersion, dwID
_RECV_HEADER_SIZE = 12
# SIMCONNECT_RECV_SIMOBJECT_DATA: header + 7 DWORDs before dwData
_SIMOBJECT_DATA_OFFSET = _RECV_HEADER_SIZE + 7 * 4
_POSITION_PAYLOAD_SIZE = 8 * len(SIMCONNECT_POSITION_VARS)


@dataclass(frozen=True)
class SimConnectMessage:
    """One message drained from the SimConnect queue.

    ``payload`` holds the raw data block for SIMOBJECT_DATA messages, the
    little-endian exception code for EXCEPTION messages, and is empty
    otherwise.
    """

    recv_id: int
    payload: bytes = b""


def _check_hr(sm: Any, hr: Any, call: str) -> None:
    if not sm.IsHR(hr, 0):
        raise ConnectionError(f"{call} returned {hr:#x}")


def _close_quietly(sm: Any) -> None:
    try:
        sm.dll.Close(sm.hSimConnect)
    except Exception:
        _logger.debug("SimConnect_Close failed after an aborted open", exc_info=True)


class SimConnectLink:
    """Synchronous SimConnect connection with one position subscription."""

    def __init__(self, app_name: str) -> None:
        self._app_name = app_name
        self._sm: Any = None
        self._dispatch_proc: Any = None
        self._request_id: int | None = None
        self._pending: list[SimConnectMessage] = []

    def open(self) -> None:
        """Connect to the simulator and subscribe to the position block.

        Raises
        ------
        BackendUnavailableError
            If the bindings are missing or the simulator is not reachable.
        """
        sm: Any = None
        connected = False
        try:
            # Windows-only binding; import deferred to connection time.
            from SimConnect import SimConnect

            sm = SimConnect(auto_connect=False)
            hr = sm.dll.Open(
                ctypes.byref(sm.hSimConnect),
                self._app_name.encode("ascii"),
                None,
                0,
                0,
                0,
            )
            _check_hr(sm, hr, "SimConnect_Open")
            connected = True
            self._subscribe(sm)
        except Exception as exc:
            self._sm = None
            if connected:
                _close_quietly(sm)
            raise BackendUnavailableError(
                f"Could not open SimConnect connection: {exc}",
                backend="simconnect",
            ) from exc
        _logger.debug("SimConnect link opened as %r", self._app_name)

    def _subscribe(self, sm: Any) -> None:
        define_id = sm.new_def_id()
        request_id = sm.new_request_id()
        for simvar, unit in SIMCONNECT_POSITION_VARS:
            hr = sm.dll.AddToDataDefinition(
                sm.hSimConnect,
                define_id.value,
                simvar.encode("ascii"),
                unit.encode("ascii"),
                SIMCONNECT_DATATYPE_FLOAT64,
                0,
                SIMCONNECT_UNUSED,
            )
            _check_hr(sm, hr, f"SimConnect_AddToDataDefinition({simvar})")
        hr = sm.dll.RequestDataOnSimObject(
            sm.hSimConnect,
            request_id.value,
            define_id.value,
            SIMCONNECT_OBJECT_ID_USER,
            SIMCONNECT_PERIOD_SECOND,
            SIMCONNECT_DATA_REQUEST_FLAG_CHANGED,
            0,
            1,
            0,
        )
        _check_hr(sm, hr, "SimConnect_RequestDataOnSimObject")
        self._sm = sm
        self._request_id = request_id.value
        self._dispatch_proc = sm.dll.DispatchProc(self._on_dispatch)

    def _on_dispatch(self, p_data: Any, _cb_data: Any, _context: Any) -> None:
        address = ctypes.addressof(p_data.contents)
        recv_id = ctypes.c_uint32.from_address(address + 8).value

        if recv_id == SIMCONNECT_RECV_ID_SIMOBJECT_DATA:
            request_id = ctypes.c_uint32.from_address(address + _RECV_HEADER_SIZE).value
            if request_id != self._request_id:
                return
            payload = ctypes.string_at(address + _SIMOBJECT_DATA_OFFSET, _POSITION_PAYLOAD_SIZE)
            self._pending.append(SimConnectMessage(recv_id, payload))
        elif recv_id == SIMCONNECT_RECV_ID_EXCEPTION:
            self._pending.append(SimConnectMessage(recv_id, ctypes.string_at(address + _RECV_HEADER_SIZE, 4)))
        else:
            self._pending.append(SimConnectMessage(recv_id))

    def dispatch(self) -> list[SimConnectMessage]:
        """Drain every queued message without blocking."""
        if self._sm is None:
            return []
        self._sm.dll.CallDispatch(self._sm.hSimConnect, self._dispatch_proc, None)
        messages, self._pending = self._pending, []
        return messages

    def close(self) -> None:
        sm = self._sm
        self._sm = None
        if sm is None:
            return
        sm.dll.Close(sm.hSimConnect)
        _logger.debug("SimConnect link closed")
