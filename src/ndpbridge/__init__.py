"""ndpbridge - relay flight simulator position to NDP chart cloud."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ndpbridge")
except PackageNotFoundError:
    __version__ = "0+local"
from ndpbridge.bridge import TelemetryBridge
from ndpbridge.config import BridgeConfig
from ndpbridge.exceptions import (
    BackendUnavailableError,
    BridgeConfigError,
    BridgeError,
    BridgeTransportError,
    ConfigMissingError,
    NoActiveSessionError,
    SessionError,
)
from ndpbridge.ingestion import normalize
from ndpbridge.models import BackendKind, CanonicalSample, PollSample, PushSample
from ndpbridge.reporter import Reporter
from ndpbridge.selector import BackendSelector, SelectionState
from ndpbridge.session import Session, resolve_session
from ndpbridge.sources import PollSource, PushSource, TelemetrySource

__all__ = [
    "__version__",
    "BackendKind",
    "BackendSelector",
    "BackendUnavailableError",
    "BridgeConfig",
    "BridgeConfigError",
    "BridgeError",
    "BridgeTransportError",
    "CanonicalSample",
    "ConfigMissingError",
    "NoActiveSessionError",
    "PollSample",
    "PollSource",
    "PushSample",
    "PushSource",
    "Reporter",
    "SelectionState",
    "Session",
    "SessionError",
    "TelemetryBridge",
    "TelemetrySource",
    "normalize",
    "resolve_session",
]
