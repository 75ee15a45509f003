"""
VaultStore — in-memory mirror of the remote key store.

Holds the complete, last-known set of ApiKey records and performs list,
upsert and delete through KeyStoreClient. Every failure is raised as a typed
VaultError; nothing is swallowed.

Previews are whatever the key store returns. Masking happens remotely, so the
store never derives a preview from a raw value.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from credvault.errors import DeleteFailed, LoadFailed, SaveFailed, ValidationFailed
from credvault.vault.client import KeyStoreClient, error_detail
from credvault.vault.models import KEY_NAME_PATTERN, ApiKey, is_valid_key_name

logger = logging.getLogger(__name__)

# Failures the client can raise for an unreachable store, a non-2xx answer,
# or a body that does not decode into records
_REMOTE_ERRORS = (httpx.HTTPError, ValueError, TypeError, ValidationError)


class VaultStore:
    """Last-known key list plus async CRUD against the key store."""

    def __init__(self, client: KeyStoreClient) -> None:
        self.client = client
        self._keys: list[ApiKey] = []

    @property
    def keys(self) -> tuple[ApiKey, ...]:
        return tuple(self._keys)

    def get(self, key_name: str) -> ApiKey | None:
        for key in self._keys:
            if key.key_name == key_name:
                return key
        return None

    def __contains__(self, key_name: object) -> bool:
        return any(key.key_name == key_name for key in self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    async def list(self) -> list[ApiKey]:
        """Fetch the full key set and replace the mirror with it."""
        try:
            records = await self.client.list_keys()
            keys = [ApiKey.model_validate(r) for r in records]
        except _REMOTE_ERRORS as e:
            logger.warning("Failed to list API keys: %s", e)
            detail = error_detail(e) if isinstance(e, httpx.HTTPError) else None
            raise LoadFailed(
                f"Failed to load API keys: {detail}" if detail else None
            ) from e
        self._keys = keys
        logger.debug("Loaded %d API keys", len(keys))
        return list(keys)

    async def upsert(self, key_name: str, raw_value: str) -> ApiKey:
        """Create or replace key_name with raw_value. Returns the stored record."""
        if not key_name:
            raise ValidationFailed("Please select or enter a key name")
        if not is_valid_key_name(key_name):
            raise ValidationFailed(
                f"Key name {key_name!r} must match {KEY_NAME_PATTERN.pattern}",
                key_name=key_name,
            )
        value = raw_value.strip()
        if not value:
            raise ValidationFailed("Please enter a key value", key_name=key_name)

        try:
            record = await self.client.upsert_key(key_name, value)
            saved = ApiKey.model_validate(record)
        except _REMOTE_ERRORS as e:
            logger.warning("Failed to save %s: %s", key_name, e)
            detail = error_detail(e) if isinstance(e, httpx.HTTPError) else None
            raise SaveFailed(
                f"Failed to save {key_name}: {detail}" if detail else f"Failed to save {key_name}",
                key_name=key_name,
            ) from e

        if saved.key_name != key_name:
            raise SaveFailed(
                f"Key store answered for {saved.key_name} instead of {key_name}",
                key_name=key_name,
            )
        self._replace(saved)
        logger.info("Saved API key %s", key_name)
        return saved

    async def delete(self, key_name: str) -> None:
        """Remove key_name. Fails if it is not in the last-known list."""
        if key_name not in self:
            raise DeleteFailed(f"{key_name} not found", key_name=key_name)

        try:
            deleted = await self.client.delete_key(key_name)
        except _REMOTE_ERRORS as e:
            logger.warning("Failed to delete %s: %s", key_name, e)
            detail = error_detail(e) if isinstance(e, httpx.HTTPError) else None
            raise DeleteFailed(
                f"Failed to delete {key_name}: {detail}" if detail else f"Failed to delete {key_name}",
                key_name=key_name,
            ) from e

        if not deleted:
            logger.warning("Key store has no %s to delete", key_name)
            raise DeleteFailed(f"{key_name} not found", key_name=key_name)
        self._keys = [k for k in self._keys if k.key_name != key_name]
        logger.info("Deleted API key %s", key_name)

    def _replace(self, saved: ApiKey) -> None:
        for i, key in enumerate(self._keys):
            if key.key_name == saved.key_name:
                self._keys[i] = saved
                return
        self._keys.append(saved)
