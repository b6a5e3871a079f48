"""Custom exception hierarchy for ndpbridge."""

from __future__ import annotations


class BridgeError(Exception):
    """Base exception for all ndpbridge errors."""


class BridgeConfigError(BridgeError):
    """Invalid or missing configuration."""


class SessionError(BridgeError):
    """No usable NDP session could be resolved.

    Always fatal: without a session there is nothing to report against.
    """


class ConfigMissingError(SessionError):
    """The NDP settings file does not exist."""


class NoActiveSessionError(SessionError):
    """The settings file exists but holds no usable session id."""


class BackendUnavailableError(BridgeError):
    """A simulator backend could not be opened.

    Recoverable; the backend selector retries on a fixed interval.
    """

    def __init__(self, message: str, *, backend: str = "") -> None:
        self.backend = backend
        super().__init__(message)


class BridgeTransportError(BridgeError):
    """HTTP-level failure (network, timeout, non-2xx)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
