"""Command-line entry point: ``python -m ndpbridge`` or ``ndpbridge``."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from typing import Any

from ndpbridge.bridge import TelemetryBridge
from ndpbridge.config import BridgeConfig
from ndpbridge.exceptions import BridgeConfigError, SessionError

_logger = logging.getLogger("ndpbridge")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ndpbridge",
        description="Relay flight simulator position to the NDP chart cloud.",
    )
    parser.add_argument("--settings", help="Path to ndp-settings.json (default: per-user app data)")
    parser.add_argument("--base-url", help="Charting service base URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Exit on startup errors without waiting for Enter",
    )
    return parser.parse_args(argv)


def _acknowledge(wait: bool) -> None:
    if not wait:
        return
    with contextlib.suppress(EOFError):
        input("Press Enter to exit...")


async def _run(config: BridgeConfig) -> None:
    async with TelemetryBridge(config) as bridge:
        await bridge.run()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.settings:
        overrides["settings_path"] = args.settings
    if args.base_url:
        overrides["base_url"] = args.base_url.rstrip("/")

    try:
        config = BridgeConfig.from_env(**overrides)
        asyncio.run(_run(config))
    except (SessionError, BridgeConfigError) as exc:
        print(exc, file=sys.stderr)
        _acknowledge(not args.no_wait)
        return 1
    except KeyboardInterrupt:
        _logger.info("Interrupted, shutting down")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
