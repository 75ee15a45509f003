"""
Service catalog — known external services and the credential slots they need.

Public API:
    ServiceCatalog.from_records(records)   → validated catalog
    load_catalog(config, client)           → catalog from YAML file or key store
    flatten(catalog)                       → selectable options
    resolve(selection, custom_name)        → canonical key name
    describe(key_name, catalog)            → owning service label or None
"""

from __future__ import annotations

from credvault.catalog.loader import fetch_catalog, load_catalog, load_catalog_file
from credvault.catalog.models import KeySlot, ServiceCatalog, ServiceConfig
from credvault.catalog.resolver import (
    CUSTOM_SELECTION,
    CustomKey,
    FlatKeyOption,
    KeyOptionIndex,
    KnownKey,
    Selection,
    describe,
    flatten,
    normalize_key_name,
    parse_selection,
    resolve,
)

__all__ = [
    "CUSTOM_SELECTION",
    "CustomKey",
    "FlatKeyOption",
    "KeyOptionIndex",
    "KeySlot",
    "KnownKey",
    "Selection",
    "ServiceCatalog",
    "ServiceConfig",
    "describe",
    "fetch_catalog",
    "flatten",
    "load_catalog",
    "load_catalog_file",
    "normalize_key_name",
    "parse_selection",
    "resolve",
]
