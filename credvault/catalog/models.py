"""Service catalog data models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from credvault.vault.models import KEY_NAME_PATTERN, is_valid_key_name


class KeySlot(BaseModel):
    """A named credential a service requires (e.g. an API key, or a secret)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    label: str = ""

    @field_validator("name")
    @classmethod
    def _canonical_name(cls, v: str) -> str:
        if not is_valid_key_name(v):
            raise ValueError(f"key slot name must match {KEY_NAME_PATTERN.pattern}: {v!r}")
        return v


class ServiceConfig(BaseModel):
    """A known external service and the credential slots it needs."""

    model_config = ConfigDict(frozen=True)

    label: str
    description: str = ""
    url: str = ""  # where an operator obtains the credentials
    keys: tuple[KeySlot, ...] = Field(min_length=1)

    @property
    def key_names(self) -> list[str]:
        return [slot.name for slot in self.keys]


@dataclass(frozen=True)
class ServiceCatalog:
    """Ordered, read-only registry of known services.

    A canonical key name may be claimed by at most one service.
    """

    services: tuple[ServiceConfig, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        owners: dict[str, str] = {}
        for service in self.services:
            for slot in service.keys:
                if slot.name in owners:
                    raise ValueError(
                        f"Key name {slot.name} is claimed by both "
                        f"{owners[slot.name]!r} and {service.label!r}"
                    )
                owners[slot.name] = service.label

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> ServiceCatalog:
        """Build a catalog from raw `{label, description, url, keys}` dicts."""
        return cls(tuple(ServiceConfig.model_validate(r) for r in records))

    def __iter__(self) -> Iterator[ServiceConfig]:
        return iter(self.services)

    def __len__(self) -> int:
        return len(self.services)

    def find_service(self, key_name: str) -> ServiceConfig | None:
        """First service owning a slot named key_name (linear scan)."""
        for service in self.services:
            for slot in service.keys:
                if slot.name == key_name:
                    return service
        return None
