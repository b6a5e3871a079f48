"""Best-effort location reporting to the charting service."""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal

from ndpbridge._constants import LOCATION_ENDPOINT
from ndpbridge._transport import Transport
from ndpbridge.exceptions import BridgeTransportError
from ndpbridge.models.sample import CanonicalSample
from ndpbridge.session import Session

_logger = logging.getLogger(__name__)

POSITION_PLACES = 6
ATTITUDE_PLACES = 2

# Wide enough to quantize any finite double without InvalidOperation.
_DECIMAL_CONTEXT = Context(prec=400)


def format_decimal(value: float, places: int) -> str:
    """Format *value* with at most *places* fractional digits.

    Mirrors a ``0.##`` style custom format: the shortest decimal
    representation of the float is rounded half away from zero, then
    trailing zeros and a dangling point are dropped. Always uses ``.`` and
    never an exponent.
    """
    if not math.isfinite(value):
        return str(value)

    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP, context=_DECIMAL_CONTEXT)
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def build_location_form(session: Session, sample: CanonicalSample) -> dict[str, str]:
    """Form fields for one location report."""
    return {
        "sessionId": session.session_id,
        "latitude": format_decimal(sample.latitude, POSITION_PLACES),
        "longitude": format_decimal(sample.longitude, POSITION_PLACES),
        "heading": format_decimal(sample.heading, ATTITUDE_PLACES),
        "altitude": format_decimal(sample.altitude, ATTITUDE_PLACES),
    }


class Reporter:
    """Sends canonical samples to the location endpoint.

    A failed report is logged and dropped. Positions are perishable, so
    nothing is retried or queued.
    """

    def __init__(self, transport: Transport, *, endpoint: str = LOCATION_ENDPOINT) -> None:
        self._transport = transport
        self._endpoint = endpoint

    async def report(self, session: Session, sample: CanonicalSample) -> None:
        """Send one sample. Never raises."""
        _logger.info(
            "Lat: %s, Lon: %s, Hdg: %s, Alt: %s",
            sample.latitude,
            sample.longitude,
            sample.heading,
            sample.altitude,
        )
        try:
            form = build_location_form(session, sample)
            await self._transport.post_form(self._endpoint, form)
        except BridgeTransportError as exc:
            _logger.warning("Error updating location! %s", exc)
        except Exception:
            _logger.exception("Unexpected error updating location")
