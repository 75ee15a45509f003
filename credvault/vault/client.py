"""
HTTP client for the remote key store.

Wraps httpx.AsyncClient. Methods return decoded JSON and raise httpx errors
(transport failures, non-2xx responses) to the caller; translating them into
the vault error taxonomy is VaultStore's job.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from credvault.config import DEFAULT_URL

logger = logging.getLogger(__name__)


def _unwrap(payload: Any, field: str) -> list[dict[str, Any]]:
    """Accept either a bare list or {field: [...]}."""
    if isinstance(payload, dict):
        payload = payload.get(field, [])
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of {field}, got {type(payload).__name__}")
    return payload


def error_detail(exc: Exception) -> str | None:
    """Best-effort error text from a failed key store response."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("error") or body.get("detail")
            if detail:
                return str(detail)
        return f"HTTP {exc.response.status_code}"
    if isinstance(exc, httpx.TransportError):
        return f"key store unreachable: {exc}"
    return None


class KeyStoreClient:
    """Async client for the key store HTTP API."""

    def __init__(self, base_url: str = DEFAULT_URL, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def list_keys(self) -> list[dict[str, Any]]:
        """GET /api/keys — every stored key (name, preview, timestamp)."""
        resp = await self._client.get("/api/keys")
        resp.raise_for_status()
        return _unwrap(resp.json(), "keys")

    async def upsert_key(self, key_name: str, value: str) -> dict[str, Any]:
        """PUT /api/keys — create or replace a key. Returns the masked record."""
        resp = await self._client.put("/api/keys", json={"key_name": key_name, "value": value})
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a key record, got {type(payload).__name__}")
        return payload

    async def delete_key(self, key_name: str) -> bool:
        """DELETE /api/keys/{key_name} — False if the store has no such key."""
        resp = await self._client.delete(f"/api/keys/{quote(key_name, safe='')}")
        if resp.status_code == 404:
            return False
        resp.raise_for_status()
        return True

    async def get_services(self) -> list[dict[str, Any]]:
        """GET /api/keys/services — the service catalog."""
        resp = await self._client.get("/api/keys/services")
        resp.raise_for_status()
        return _unwrap(resp.json(), "services")
