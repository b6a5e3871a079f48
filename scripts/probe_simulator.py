#!/usr/bin/env python3
"""Simulator probe: print normalized samples without reporting them.

Opens one backend (SimConnect, FSUIPC/XPUIPC, or whichever the selector
picks first) and prints canonical samples to stdout. Useful to check that
positions look sane before a real NDP session is involved.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from ndpbridge import BridgeConfig  # noqa: E402
from ndpbridge.ingestion.normalize import normalize  # noqa: E402
from ndpbridge.reporter import ATTITUDE_PLACES, POSITION_PLACES, format_decimal  # noqa: E402
from ndpbridge.selector import BackendSelector  # noqa: E402
from ndpbridge.sources import PollSource, PushSource, TelemetrySource  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--backend",
        choices=("auto", "simconnect", "fsuipc"),
        default="auto",
        help="Backend to open (default: same priority as the bridge)",
    )
    parser.add_argument("--count", type=int, default=10, help="Samples to print before exiting (0 = forever)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


async def _open(config: BridgeConfig, backend: str) -> TelemetrySource:
    if backend == "simconnect":
        return await PushSource.open(config)
    if backend == "fsuipc":
        return await PollSource.open(config)
    return await BackendSelector.from_config(config).select()


async def _probe(config: BridgeConfig, backend: str, count: int) -> None:
    source = await _open(config, backend)
    print(f"connected via {source.kind.label}")
    seen = 0
    try:
        async for raw in source.samples():
            sample = normalize(raw)
            print(
                f"lat={format_decimal(sample.latitude, POSITION_PLACES)} "
                f"lon={format_decimal(sample.longitude, POSITION_PLACES)} "
                f"hdg={format_decimal(sample.heading, ATTITUDE_PLACES)} "
                f"alt={format_decimal(sample.altitude, ATTITUDE_PLACES)}  raw={raw}"
            )
            seen += 1
            if count and seen >= count:
                break
    finally:
        source.close()


def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(_probe(BridgeConfig.from_env(), args.backend, args.count))
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
