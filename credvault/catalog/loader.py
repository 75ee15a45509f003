"""
Catalog loading — from a local YAML file or from the key store.

The YAML file is either a list of services or a mapping with a `services`
list:

    services:
      - label: OpenAI
        description: GPT models and embeddings
        url: https://platform.openai.com/api-keys
        keys:
          - name: OPENAI_API_KEY
            label: API Key
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from credvault.catalog.models import ServiceCatalog
from credvault.config import Config
from credvault.errors import LoadFailed
from credvault.vault.client import KeyStoreClient, error_detail

logger = logging.getLogger(__name__)


def _records(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get("services", [])
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"Catalog must be a list of services, got {type(data).__name__}")
    return data


def load_catalog_file(path: Path) -> ServiceCatalog:
    """Load and validate a YAML catalog file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        catalog = ServiceCatalog.from_records(_records(data))
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.error("Failed to load service catalog %s: %s", path, e)
        raise LoadFailed(f"Failed to load service catalog: {e}") from e
    logger.debug("Loaded %d services from %s", len(catalog), path)
    return catalog


async def fetch_catalog(client: KeyStoreClient) -> ServiceCatalog:
    """Fetch and validate the catalog served by the key store."""
    try:
        records = await client.get_services()
        catalog = ServiceCatalog.from_records(records)
    except (httpx.HTTPError, ValueError, ValidationError) as e:
        logger.warning("Failed to fetch service catalog: %s", e)
        detail = error_detail(e) if isinstance(e, httpx.HTTPError) else str(e)
        raise LoadFailed(f"Failed to load service catalog: {detail}") from e
    logger.debug("Fetched %d services from key store", len(catalog))
    return catalog


async def load_catalog(config: Config, client: KeyStoreClient) -> ServiceCatalog:
    """Load the session's catalog: the configured file if any, else the key store."""
    if config.catalog_file is not None:
        return load_catalog_file(config.catalog_file)
    return await fetch_catalog(client)
