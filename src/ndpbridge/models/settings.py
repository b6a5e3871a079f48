"""NDP chart cloud settings file model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChartCloudSettings(BaseModel):
    """Subset of ``ndp-settings.json`` written by the NDP desktop client.

    Only the session id is read; every other key is ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    session_id: str = Field(default="", alias="sessionId")
