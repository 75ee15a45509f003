"""Vault data models."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

KEY_NAME_PATTERN = re.compile(r"^[A-Z0-9_]+$")


def is_valid_key_name(key_name: str) -> bool:
    return bool(key_name) and KEY_NAME_PATTERN.fullmatch(key_name) is not None


class ApiKey(BaseModel):
    """A stored credential as reported by the key store (never the raw value)."""

    model_config = ConfigDict(extra="ignore")

    key_name: str
    key_preview: str = ""
    updated_at: str = ""

    @field_validator("key_name")
    @classmethod
    def _canonical_name(cls, v: str) -> str:
        if not is_valid_key_name(v):
            raise ValueError(f"key_name must match {KEY_NAME_PATTERN.pattern}: {v!r}")
        return v

    @field_validator("updated_at", mode="before")
    @classmethod
    def _timestamp_as_text(cls, v: object) -> str:
        if v is None:
            return ""
        if isinstance(v, datetime):
            return v.isoformat()
        return str(v)


def format_updated_at(ts: str) -> str:
    """Render a timestamp as e.g. "Oct 17, 2026". Unparsable input is returned as-is."""
    try:
        d = datetime.fromisoformat(ts)
    except (TypeError, ValueError):
        return ts
    return f"{d:%b} {d.day}, {d.year}"
