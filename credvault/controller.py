"""
VaultController — operator-facing state machine for the API key vault.

Phases:
    LOADING  → catalog and key list are being fetched (concurrently)
    READY    → interactive; see Mode

Modes within READY:
    IDLE            nothing in progress
    ADD_FORM_OPEN   operator is filling in the add form
    SAVING          an upsert (and its refresh) is in flight
    CONFIRM_DELETE  a delete was requested and awaits confirmation
    DELETING        a delete (and its refresh) is in flight

Only one SAVING or DELETING may be in flight. Requests made while busy are
rejected (the method returns False) and nothing is sent to the key store.

Once detach() is called, results of calls still in flight are discarded
instead of being applied to controller state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum

from credvault.catalog.loader import load_catalog
from credvault.catalog.models import ServiceCatalog
from credvault.catalog.resolver import (
    CustomKey,
    FlatKeyOption,
    KeyOptionIndex,
    KnownKey,
    Selection,
    parse_selection,
    resolve,
)
from credvault.config import Config, get_config
from credvault.errors import VaultError
from credvault.vault.client import KeyStoreClient
from credvault.vault.models import ApiKey, format_updated_at
from credvault.vault.store import VaultStore

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[], Awaitable[ServiceCatalog]]


class Phase(StrEnum):
    LOADING = "loading"
    READY = "ready"


class Mode(StrEnum):
    IDLE = "idle"
    ADD_FORM_OPEN = "add_form_open"
    SAVING = "saving"
    CONFIRM_DELETE = "confirm_delete"
    DELETING = "deleting"


@dataclass(frozen=True)
class Feedback:
    """A user-visible success or error message."""

    kind: str  # success, error
    text: str

    @classmethod
    def success(cls, text: str) -> Feedback:
        return cls("success", text)

    @classmethod
    def error(cls, text: str) -> Feedback:
        return cls("error", text)

    @property
    def is_error(self) -> bool:
        return self.kind == "error"


@dataclass(frozen=True)
class KeyRow:
    """Display shape of one stored key."""

    key_name: str
    service_label: str | None
    preview: str
    updated: str
    deleting: bool = False


@dataclass
class AddForm:
    selection: Selection | None = None
    value: str = ""

    @property
    def custom_name(self) -> str:
        return self.selection.raw_input if isinstance(self.selection, CustomKey) else ""


@dataclass
class VaultController:
    """Drives load, add, save and delete against a VaultStore."""

    store: VaultStore
    catalog_loader: CatalogLoader
    phase: Phase = Phase.LOADING
    mode: Mode = Mode.IDLE
    feedback: Feedback | None = None
    pending_delete: str | None = None
    form: AddForm = field(default_factory=AddForm)
    index: KeyOptionIndex = field(default_factory=KeyOptionIndex)
    _attached: bool = field(default=True, init=False, repr=False)

    @classmethod
    def from_config(cls, config: Config | None = None) -> VaultController:
        """Controller talking to the key store named by config (env by default)."""
        cfg = config or get_config()
        client = KeyStoreClient(base_url=cfg.base_url, timeout=cfg.timeout)
        return cls(store=VaultStore(client), catalog_loader=lambda: load_catalog(cfg, client))

    # ── Derived state ────────────────────────────────────────────────

    @property
    def catalog(self) -> ServiceCatalog:
        return self.index.catalog

    @property
    def keys(self) -> tuple[ApiKey, ...]:
        return self.store.keys

    @property
    def options(self) -> list[FlatKeyOption]:
        return self.index.options

    @property
    def busy(self) -> bool:
        return self.mode in (Mode.SAVING, Mode.DELETING)

    @property
    def is_attached(self) -> bool:
        return self._attached

    @property
    def resolved_key_name(self) -> str:
        return resolve(self.form.selection)

    @property
    def selected_option(self) -> FlatKeyOption | None:
        """Catalog option behind the current selection, for its description and URL."""
        if isinstance(self.form.selection, KnownKey):
            return self.index.option_for(self.form.selection.key_name)
        return None

    @property
    def can_save(self) -> bool:
        return (
            self.mode is Mode.ADD_FORM_OPEN
            and bool(self.resolved_key_name)
            and bool(self.form.value.strip())
        )

    def can_delete(self, key_name: str) -> bool:
        return self.phase is Phase.READY and self.mode is Mode.IDLE and key_name in self.store

    def rows(self) -> list[KeyRow]:
        deleting = self.pending_delete if self.mode is Mode.DELETING else None
        return [
            KeyRow(
                key_name=key.key_name,
                service_label=self.index.describe(key.key_name),
                preview=key.key_preview,
                updated=format_updated_at(key.updated_at),
                deleting=key.key_name == deleting,
            )
            for key in self.store.keys
        ]

    # ── Loading ──────────────────────────────────────────────────────

    async def activate(self) -> None:
        """Load the catalog and key list concurrently, then become READY.

        Ignored while a save or delete is in flight.
        """
        if self.busy:
            logger.debug("Activate rejected in mode %s", self.mode)
            return
        self.phase = Phase.LOADING
        self.mode = Mode.IDLE
        catalog_result, keys_result = await asyncio.gather(
            self.catalog_loader(), self.store.list(), return_exceptions=True
        )
        if not self._attached:
            logger.debug("Discarding load results after teardown")
            return

        errors: list[VaultError] = []
        for result in (catalog_result, keys_result):
            if isinstance(result, VaultError):
                errors.append(result)
            elif isinstance(result, BaseException):
                raise result

        if isinstance(catalog_result, ServiceCatalog):
            self.index = KeyOptionIndex(catalog_result)
        else:
            self.index = KeyOptionIndex()

        if errors:
            # Key list error wins when both fail
            self.feedback = Feedback.error(errors[-1].message)
        self.phase = Phase.READY
        logger.info(
            "Vault ready: %d keys, %d known options", len(self.store), len(self.index)
        )

    async def refresh(self) -> bool:
        """Re-fetch the key list. Prior state is kept if the fetch fails.

        Rejected (False, nothing fetched) while a save or delete is in flight;
        those refresh on their own once the write resolves.
        """
        if self.busy:
            logger.debug("Refresh rejected in mode %s", self.mode)
            return False
        return await self._refresh()

    async def _refresh(self) -> bool:
        try:
            await self.store.list()
        except VaultError as e:
            if self._attached:
                self.feedback = Feedback.error(e.message)
            return False
        return True

    # ── Add form ─────────────────────────────────────────────────────

    def open_add_form(self) -> bool:
        if self.phase is not Phase.READY or self.mode is not Mode.IDLE:
            return False
        self.form = AddForm()
        self.mode = Mode.ADD_FORM_OPEN
        return True

    def cancel_add(self) -> bool:
        if self.mode is not Mode.ADD_FORM_OPEN:
            return False
        self.form = AddForm()
        self.mode = Mode.IDLE
        return True

    def select(self, selection: Selection | str | None) -> bool:
        """Choose a catalog key or custom entry. Clears any custom name typed so far."""
        if self.mode is not Mode.ADD_FORM_OPEN:
            return False
        if isinstance(selection, str):
            selection = parse_selection(selection)
        if isinstance(selection, KnownKey) and selection.key_name not in self.index:
            self.feedback = Feedback.error(f"{selection.key_name} is not a known service key")
            return False
        self.form.selection = selection
        return True

    def set_custom_name(self, text: str) -> bool:
        if self.mode is not Mode.ADD_FORM_OPEN:
            return False
        self.form.selection = CustomKey(text)
        return True

    def set_value(self, text: str) -> bool:
        if self.mode is not Mode.ADD_FORM_OPEN:
            return False
        self.form.value = text
        return True

    async def save(self) -> bool:
        """Upsert the form's key. True once the key is stored."""
        if self.mode is not Mode.ADD_FORM_OPEN:
            logger.debug("Save rejected in mode %s", self.mode)
            return False

        key_name = self.resolved_key_name
        if not key_name:
            self.feedback = Feedback.error("Please select or enter a key name")
            return False
        if not self.form.value.strip():
            self.feedback = Feedback.error("Please enter a key value")
            return False

        self.mode = Mode.SAVING
        self.feedback = None
        try:
            await self.store.upsert(key_name, self.form.value)
        except VaultError as e:
            if self._attached:
                # Form fields stay intact for a retry
                self.mode = Mode.ADD_FORM_OPEN
                self.feedback = Feedback.error(e.message)
            return False

        if not self._attached:
            logger.debug("Discarding save result for %s after teardown", key_name)
            return True

        self.form = AddForm()
        self.feedback = Feedback.success(f"{key_name} saved successfully")
        await self._refresh()
        if self._attached:
            self.mode = Mode.IDLE
        return True

    # ── Delete ───────────────────────────────────────────────────────

    def request_delete(self, key_name: str) -> bool:
        """First step of a delete; nothing is removed until confirm_delete()."""
        if not self.can_delete(key_name):
            return False
        self.pending_delete = key_name
        self.mode = Mode.CONFIRM_DELETE
        return True

    def cancel_delete(self) -> bool:
        if self.mode is not Mode.CONFIRM_DELETE:
            return False
        self.pending_delete = None
        self.mode = Mode.IDLE
        return True

    async def confirm_delete(self) -> bool:
        """Delete the key awaiting confirmation. True once it is removed."""
        if self.mode is not Mode.CONFIRM_DELETE or self.pending_delete is None:
            logger.debug("Delete confirmation rejected in mode %s", self.mode)
            return False

        key_name = self.pending_delete
        self.mode = Mode.DELETING
        self.feedback = None
        try:
            await self.store.delete(key_name)
        except VaultError as e:
            if self._attached:
                self.feedback = Feedback.error(e.message)
                self._finish_delete()
            return False

        if not self._attached:
            logger.debug("Discarding delete result for %s after teardown", key_name)
            return True

        self.feedback = Feedback.success(f"{key_name} deleted")
        await self._refresh()
        if self._attached:
            self._finish_delete()
        return True

    def _finish_delete(self) -> None:
        self.pending_delete = None
        self.mode = Mode.IDLE

    # ── Feedback / teardown ──────────────────────────────────────────

    def dismiss_feedback(self) -> None:
        self.feedback = None

    def detach(self) -> None:
        """Stop applying results; the presenting surface is gone."""
        self._attached = False

    async def close(self) -> None:
        self.detach()
        await self.store.client.close()
