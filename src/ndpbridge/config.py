"""Bridge configuration for ndpbridge."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from ndpbridge._constants import (
    BASE_URL,
    DEFAULT_DISPATCH_INTERVAL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RETRY_INTERVAL,
    SETTINGS_DIR,
    SETTINGS_FILE,
    SIMCONNECT_APP_NAME,
)
from ndpbridge.exceptions import BridgeConfigError


def default_settings_path() -> Path:
    """Location of the NDP chart cloud settings file for the current user.

    ``%APPDATA%`` on Windows; ``~/.config`` elsewhere, which is where the
    desktop client keeps its application data on other hosts.
    """
    appdata = os.environ.get("APPDATA")
    base = Path(appdata) if appdata else Path.home() / ".config"
    return base / SETTINGS_DIR / SETTINGS_FILE


def _env_float(env_key: str, value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise BridgeConfigError(f"{env_key} must be a number, got {value!r}") from exc
    if not number > 0:
        raise BridgeConfigError(f"{env_key} must be greater than zero, got {value!r}")
    return number


@dataclasses.dataclass(frozen=True)
class BridgeConfig:
    """Bridge configuration.

    Parameters
    ----------
    settings_path : Path
        NDP settings file holding the active ``sessionId``.
    base_url : str
        Charting service base URL. The location endpoint is appended.
    retry_interval : float
        Seconds to wait between failed backend selection attempts.
    dispatch_interval : float
        Seconds between SimConnect message queue drains.
    poll_interval : float
        Seconds between FSUIPC offset reads.
    simconnect_app_name : str
        Client name announced to SimConnect.
    """

    settings_path: Path = dataclasses.field(default_factory=default_settings_path)
    base_url: str = BASE_URL
    retry_interval: float = DEFAULT_RETRY_INTERVAL
    dispatch_interval: float = DEFAULT_DISPATCH_INTERVAL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    simconnect_app_name: str = SIMCONNECT_APP_NAME

    @classmethod
    def from_env(cls, **overrides: Any) -> BridgeConfig:
        """Create configuration from environment variables.

        Reads optional ``NDP_*`` variables. Explicit keyword arguments
        override environment values.

        Raises
        ------
        BridgeConfigError
            If an interval variable is not a positive number.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        settings_env = env.get("NDP_SETTINGS_PATH")
        if settings_env:
            config_kwargs["settings_path"] = Path(settings_env)

        base_url_env = env.get("NDP_BASE_URL")
        if base_url_env:
            config_kwargs["base_url"] = base_url_env.rstrip("/")

        name_env = env.get("NDP_SIMCONNECT_NAME")
        if name_env:
            config_kwargs["simconnect_app_name"] = name_env

        _ENV_INTERVAL_MAP = {
            "NDP_RETRY_INTERVAL": "retry_interval",
            "NDP_DISPATCH_INTERVAL": "dispatch_interval",
            "NDP_POLL_INTERVAL": "poll_interval",
        }
        for env_key, field_name in _ENV_INTERVAL_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "settings_path" in overrides and not isinstance(overrides["settings_path"], Path):
            overrides["settings_path"] = Path(overrides["settings_path"])

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
