"""Test fixtures for the credvault TUI."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from credvault.catalog.loader import fetch_catalog
from credvault.controller import VaultController
from credvault.vault.store import VaultStore


@pytest.fixture
def vault_controller(fake_store) -> VaultController:
    """A controller over the in-memory key store."""
    return VaultController(
        store=VaultStore(fake_store),
        catalog_loader=lambda: fetch_catalog(fake_store),
    )


@pytest_asyncio.fixture
async def mock_app(vault_controller):
    """A mock VaultApp for command handlers, with an activated controller."""
    await vault_controller.activate()
    app = MagicMock()
    app.controller = vault_controller
    app.show_keys = AsyncMock()

    async def run_save() -> None:
        await vault_controller.save()

    async def run_delete() -> None:
        await vault_controller.confirm_delete()

    app.run_save = AsyncMock(side_effect=run_save)
    app.run_delete = AsyncMock(side_effect=run_delete)
    app.prompt_for_value = MagicMock()
    app.exit = MagicMock()
    return app
