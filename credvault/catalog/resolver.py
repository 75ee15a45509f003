"""
Key option resolution — turns the catalog into selectable options and an
operator's choice into a canonical key name.

A selection is either a catalog key (KnownKey) or a free-form name typed by
the operator (CustomKey). Catalog names are used verbatim; custom names are
normalized to the canonical alphabet (uppercase letters, digits, underscore).

Usage:
    from credvault.catalog.resolver import CustomKey, KnownKey, flatten, resolve

    options = flatten(catalog)
    resolve(KnownKey("OPENAI_API_KEY"))   # "OPENAI_API_KEY"
    resolve(CustomKey("my key!!"))        # "MYKEY"
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from credvault.catalog.models import ServiceCatalog, ServiceConfig

# String form of the custom-entry choice, for surfaces that only pass strings
CUSTOM_SELECTION = "__custom__"

_INVALID_KEY_CHARS = re.compile(r"[^A-Z0-9_]")


@dataclass(frozen=True)
class FlatKeyOption:
    """One selectable (service, key slot) pair. Derived, never stored."""

    key_name: str
    label: str
    service_label: str
    description: str
    url: str


@dataclass(frozen=True)
class KnownKey:
    """A key name picked from the catalog."""

    key_name: str


@dataclass(frozen=True)
class CustomKey:
    """A free-form key name typed by the operator."""

    raw_input: str


Selection = KnownKey | CustomKey


def normalize_key_name(raw: str) -> str:
    """Uppercase, then strip every character outside [A-Z0-9_]."""
    return _INVALID_KEY_CHARS.sub("", raw.upper())


def parse_selection(value: str, custom_name: str = "") -> Selection | None:
    """Map the string form of a selection to a tagged one.

    "" means nothing is selected; CUSTOM_SELECTION means a custom name.
    """
    if not value:
        return None
    if value == CUSTOM_SELECTION:
        return CustomKey(custom_name)
    return KnownKey(value)


def resolve(selection: Selection | str | None, custom_name: str = "") -> str:
    """Resolve a selection to its canonical key name ("" when unresolvable)."""
    if isinstance(selection, str):
        selection = parse_selection(selection, custom_name)
    if selection is None:
        return ""
    if isinstance(selection, CustomKey):
        return normalize_key_name(selection.raw_input)
    return selection.key_name


def _option(service: ServiceConfig, slot_name: str, slot_label: str) -> FlatKeyOption:
    return FlatKeyOption(
        key_name=slot_name,
        label=f"{slot_name} — {service.label} {slot_label}".rstrip(),
        service_label=service.label,
        description=service.description,
        url=service.url,
    )


def flatten(catalog: ServiceCatalog) -> list[FlatKeyOption]:
    """One option per (service, slot), in catalog order then slot order."""
    return [_option(service, slot.name, slot.label) for service in catalog for slot in service.keys]


def describe(key_name: str, catalog: ServiceCatalog) -> str | None:
    """Label of the service owning key_name, or None for custom/unknown keys."""
    service = catalog.find_service(key_name)
    return service.label if service else None


class KeyOptionIndex:
    """Key name → option lookup, built once per catalog load."""

    def __init__(self, catalog: ServiceCatalog | None = None) -> None:
        self.catalog = catalog or ServiceCatalog()
        self._options = flatten(self.catalog)
        self._by_name = {opt.key_name: opt for opt in self._options}

    @property
    def options(self) -> list[FlatKeyOption]:
        return list(self._options)

    def option_for(self, key_name: str) -> FlatKeyOption | None:
        return self._by_name.get(key_name)

    def describe(self, key_name: str) -> str | None:
        option = self._by_name.get(key_name)
        return option.service_label if option else None

    def __contains__(self, key_name: object) -> bool:
        return key_name in self._by_name

    def __len__(self) -> int:
        return len(self._options)
