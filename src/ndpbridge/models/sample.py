"""Telemetry sample models.

Raw samples carry whatever the backend delivered; the variant is the type
itself, so :func:`ndpbridge.ingestion.normalize.normalize` can dispatch on
it. :class:`CanonicalSample` is what gets reported.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar


class BackendKind(enum.Enum):
    """Simulator backends, in selection priority order."""

    SIMCONNECT = "simconnect"
    FSUIPC = "fsuipc"

    @property
    def label(self) -> str:
        return "SimConnect" if self is BackendKind.SIMCONNECT else "FSUIPC/XPUIPC"


@dataclass(frozen=True, slots=True)
class PushSample:
    """Position block pushed by a SimConnect data subscription.

    Already in degrees/degrees/degrees/feet.
    """

    kind: ClassVar[BackendKind] = BackendKind.SIMCONNECT

    latitude: float
    longitude: float
    heading: float
    altitude: float


@dataclass(frozen=True, slots=True)
class PollSample:
    """Raw FSUIPC offset values from one timer tick.

    Parameters
    ----------
    latitude : int
        Signed 64-bit fixed-point latitude (offset 0x0560).
    longitude : int
        Signed 64-bit fixed-point longitude (offset 0x0568).
    heading : int
        Unsigned 32-bit fraction of a full turn (offset 0x0580).
    altitude : int
        Unsigned 32-bit metres * 256 (offset 0x0020).
    """

    kind: ClassVar[BackendKind] = BackendKind.FSUIPC

    latitude: int
    longitude: int
    heading: int
    altitude: int


RawSample = PushSample | PollSample


@dataclass(frozen=True, slots=True)
class CanonicalSample:
    """Normalized aircraft position: degrees, degrees, degrees true, feet."""

    latitude: float
    longitude: float
    heading: float
    altitude: float
