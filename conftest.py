"""
Root-level shared test fixtures.

Inherited by the catalog, vault and TUI suites as well as tests/.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from credvault.catalog.models import ServiceCatalog
from credvault.config import reset_config

SERVICE_RECORDS: list[dict[str, Any]] = [
    {
        "label": "OpenAI",
        "description": "GPT models and embeddings",
        "url": "https://platform.openai.com/api-keys",
        "keys": [{"name": "OPENAI_API_KEY", "label": "Key"}],
    },
    {
        "label": "Twitter",
        "description": "Post to X/Twitter",
        "url": "https://developer.x.com",
        "keys": [
            {"name": "TWITTER_CONSUMER_KEY", "label": "Consumer Key"},
            {"name": "TWITTER_CONSUMER_SECRET", "label": "Consumer Secret"},
        ],
    },
    {
        "label": "GitHub",
        "description": "Repository access for agents",
        "url": "",
        "keys": [{"name": "GITHUB_TOKEN", "label": "Token"}],
    },
]


def mask(value: str) -> str:
    """Preview format used by the fake key store."""
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}...{value[-3:]}"


class FakeKeyStore:
    """In-memory stand-in for KeyStoreClient.

    Methods listed in `failing` raise a connection error. `hold_upsert`/
    `hold_delete`, when set, block those calls until the event is set.
    """

    def __init__(self, services: list[dict[str, Any]] | None = None) -> None:
        self.records: dict[str, dict[str, Any]] = {}
        self.services = services if services is not None else SERVICE_RECORDS
        self.calls: list[str] = []
        self.failing: set[str] = set()
        self.hold_upsert: asyncio.Event | None = None
        self.hold_delete: asyncio.Event | None = None
        self.closed = False
        self._clock = 0

    def _enter(self, method: str) -> None:
        self.calls.append(method)
        if method in self.failing:
            raise httpx.ConnectError("Connection refused")

    def count(self, method: str) -> int:
        return self.calls.count(method)

    def seed(self, key_name: str, value: str) -> None:
        self._clock += 1
        self.records[key_name] = {
            "key_name": key_name,
            "key_preview": mask(value),
            "updated_at": f"2026-10-{self._clock:02d}T12:00:00+00:00",
        }

    async def list_keys(self) -> list[dict[str, Any]]:
        self._enter("list_keys")
        return [dict(r) for r in self.records.values()]

    async def upsert_key(self, key_name: str, value: str) -> dict[str, Any]:
        self._enter("upsert_key")
        if self.hold_upsert is not None:
            await self.hold_upsert.wait()
        self.seed(key_name, value)
        return dict(self.records[key_name])

    async def delete_key(self, key_name: str) -> bool:
        self._enter("delete_key")
        if self.hold_delete is not None:
            await self.hold_delete.wait()
        return self.records.pop(key_name, None) is not None

    async def get_services(self) -> list[dict[str, Any]]:
        self._enter("get_services")
        return list(self.services)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_config():
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove credvault env vars that leak between tests."""
    for key in [
        "CREDVAULT_URL",
        "CREDVAULT_TIMEOUT",
        "CREDVAULT_CATALOG_FILE",
        "CREDVAULT_LOG_LEVEL",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def service_records() -> list[dict[str, Any]]:
    return [dict(r) for r in SERVICE_RECORDS]


@pytest.fixture
def catalog() -> ServiceCatalog:
    return ServiceCatalog.from_records(SERVICE_RECORDS)


@pytest.fixture
def fake_store() -> FakeKeyStore:
    return FakeKeyStore()
