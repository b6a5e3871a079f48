"""Normalization of raw backend samples.

Every function here is pure and total for well-formed input. The FSUIPC
conversions are applied exactly as documented for each offset, without
wrapping or clamping, so results are bit-reproducible.
"""

from __future__ import annotations

from ndpbridge._constants import (
    FEET_PER_METRE_DIVISOR,
    FSUIPC_ALTITUDE_SCALE,
    FSUIPC_HEADING_SCALE,
    FSUIPC_LAT_SCALE,
    FSUIPC_LON_SCALE,
)
from ndpbridge.models.sample import CanonicalSample, PollSample, PushSample, RawSample


def fs_latitude_to_deg(raw: int) -> float:
    """Signed 64-bit FSUIPC latitude to decimal degrees."""
    return raw * 90.0 / FSUIPC_LAT_SCALE


def fs_longitude_to_deg(raw: int) -> float:
    """Signed 64-bit FSUIPC longitude to decimal degrees."""
    return raw * 360.0 / FSUIPC_LON_SCALE


def fs_heading_to_deg(raw: int) -> float:
    """Unsigned 32-bit fraction of a turn to degrees.

    ``65535**2`` maps to exactly 360.0.
    """
    return raw * 360.0 / FSUIPC_HEADING_SCALE


def fs_altitude_to_ft(raw: int) -> float:
    """Metres * 256 to feet."""
    return raw / FEET_PER_METRE_DIVISOR / FSUIPC_ALTITUDE_SCALE


def normalize_push(sample: PushSample) -> CanonicalSample:
    return CanonicalSample(
        latitude=sample.latitude,
        longitude=sample.longitude,
        heading=sample.heading,
        altitude=sample.altitude,
    )


def normalize_poll(sample: PollSample) -> CanonicalSample:
    return CanonicalSample(
        latitude=fs_latitude_to_deg(sample.latitude),
        longitude=fs_longitude_to_deg(sample.longitude),
        heading=fs_heading_to_deg(sample.heading),
        altitude=fs_altitude_to_ft(sample.altitude),
    )


def normalize(sample: RawSample) -> CanonicalSample:
    """Convert a raw sample from either backend to canonical units."""
    if isinstance(sample, PollSample):
        return normalize_poll(sample)
    return normalize_push(sample)
