"""Simulator telemetry sources.

Exactly one source is live per process. Both variants satisfy
:class:`TelemetrySource`: an async iterator of raw samples plus ``close()``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from ndpbridge.models.sample import BackendKind, RawSample
from ndpbridge.sources.poll import PollSource
from ndpbridge.sources.push import PushSource


class TelemetrySource(Protocol):
    """Structural interface shared by the push and poll sources."""

    kind: BackendKind

    def samples(self) -> AsyncIterator[RawSample]:
        ...

    def close(self) -> None:
        ...


__all__ = ["PollSource", "PushSource", "TelemetrySource"]
