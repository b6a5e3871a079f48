"""Resolution of the active NDP session from local settings."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ndpbridge.exceptions import ConfigMissingError, NoActiveSessionError
from ndpbridge.models.settings import ChartCloudSettings

_logger = logging.getLogger(__name__)


class Session(BaseModel):
    """The NDP chart cloud session reports are filed against.

    Parameters
    ----------
    session_id : str
        Opaque session identifier, sent verbatim with every report.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    session_id: str = Field(min_length=1)

    @property
    def masked_id(self) -> str:
        """Session id with all but the first four characters hidden."""
        if len(self.session_id) <= 4:
            return "*" * len(self.session_id)
        return f"{self.session_id[:4]}{'*' * (len(self.session_id) - 4)}"


def resolve_session(settings_path: Path) -> Session:
    """Load the active session from the NDP settings file.

    Raises
    ------
    ConfigMissingError
        If *settings_path* does not exist.
    NoActiveSessionError
        If the file cannot be read or parsed, or its ``sessionId`` is empty.
    """
    if not settings_path.is_file():
        raise ConfigMissingError("Could not find NDP settings file!")

    try:
        text = settings_path.read_text(encoding="utf-8-sig").strip()
    except (OSError, UnicodeDecodeError) as exc:
        raise NoActiveSessionError("No active NDP session!") from exc

    try:
        settings = ChartCloudSettings.model_validate_json(text)
    except ValidationError as exc:
        _logger.debug("Unparsable settings file %s: %s", settings_path, exc)
        raise NoActiveSessionError("No active NDP session!") from exc

    if not settings.session_id:
        raise NoActiveSessionError("No active NDP session!")

    session = Session(session_id=settings.session_id)
    _logger.info("Found existing NDP session: %s", session.masked_id)
    return session
