"""
Vault — the operator's view of the remote key store.

Public API:
    VaultStore(client).list()                 → every stored ApiKey
    VaultStore(client).upsert(name, value)    → stored ApiKey (masked preview)
    VaultStore(client).delete(name)           → remove
"""

from __future__ import annotations

from credvault.vault.client import KeyStoreClient
from credvault.vault.models import ApiKey, format_updated_at, is_valid_key_name
from credvault.vault.store import VaultStore

__all__ = ["ApiKey", "KeyStoreClient", "VaultStore", "format_updated_at", "is_valid_key_name"]
