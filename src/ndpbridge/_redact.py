"""Masking of report forms for debug logs.

Every location form carries the NDP session id, the only credential the
charting service asks for.
"""

from __future__ import annotations

from collections.abc import Mapping

_SECRET_FIELDS: frozenset[str] = frozenset({"sessionid"})


def mask_form(form: Mapping[str, str]) -> dict[str, str]:
    """Copy of *form* with secret fields replaced by ``<redacted>``."""
    return {key: "<redacted>" if key.lower() in _SECRET_FIELDS else value for key, value in form.items()}
