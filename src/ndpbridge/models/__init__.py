"""Data models for ndpbridge."""

from ndpbridge.models.sample import BackendKind, CanonicalSample, PollSample, PushSample, RawSample
from ndpbridge.models.settings import ChartCloudSettings

__all__ = [
    "BackendKind",
    "CanonicalSample",
    "ChartCloudSettings",
    "PollSample",
    "PushSample",
    "RawSample",
]
