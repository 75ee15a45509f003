"""
Vault error taxonomy.

Every failure in the vault surfaces as one of these. None of them is fatal to
an operator session; the controller turns each into user-visible feedback.
"""

from __future__ import annotations


class VaultError(Exception):
    """Base class for vault failures. Carries the offending key name when known."""

    default_message = "Vault operation failed"

    def __init__(self, message: str | None = None, *, key_name: str | None = None) -> None:
        self.key_name = key_name
        self.message = message or self.default_message
        super().__init__(self.message)


class LoadFailed(VaultError):
    """The catalog or key list could not be fetched."""

    default_message = "Failed to load API keys"


class ValidationFailed(VaultError):
    """Input rejected locally; never reaches the remote store."""

    default_message = "Invalid key name or value"


class SaveFailed(VaultError):
    """The remote store rejected the upsert or was unreachable."""

    default_message = "Failed to save API key"


class DeleteFailed(VaultError):
    """The remote store rejected the delete, or the key does not exist."""

    default_message = "Failed to delete API key"
