"""
Centralized configuration for credvault.

All configuration is loaded from environment variables with sensible defaults.

Usage:
    from credvault.config import get_config
    cfg = get_config()
    print(cfg.base_url)       # "http://127.0.0.1:8080" or $CREDVAULT_URL
    print(cfg.catalog_file)   # None, or $CREDVAULT_CATALOG_FILE
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_URL = "http://127.0.0.1:8080"


@dataclass(frozen=True)
class Config:
    """Top-level credvault configuration."""

    # Remote key store
    base_url: str = DEFAULT_URL
    timeout: float = 10.0

    # Service catalog: a local YAML file, or None to fetch it from the key store
    catalog_file: Path | None = None

    log_level: str = "WARNING"

    @property
    def keys_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/keys"

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, falling back to WARNING for unknown names."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    catalog_file = os.environ.get("CREDVAULT_CATALOG_FILE", "")
    return Config(
        base_url=os.environ.get("CREDVAULT_URL", DEFAULT_URL),
        timeout=float(os.environ.get("CREDVAULT_TIMEOUT", "10")),
        catalog_file=Path(catalog_file).expanduser() if catalog_file else None,
        log_level=os.environ.get("CREDVAULT_LOG_LEVEL", "WARNING"),
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
