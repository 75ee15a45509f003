"""
VaultApp — Textual front end for the credvault key vault.

A command-driven screen over VaultController: slash commands open the add
form, pick a key, save, and delete with an explicit /confirm step. Saves and
deletes run as background tasks so the screen stays responsive; the
controller rejects a second one while the first is in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Input

from credvault.config import Config
from credvault.controller import Phase, VaultController
from credvault.tui.widgets import KeyTable, MessageDisplay, StatusBar, WelcomeBanner

logger = logging.getLogger(__name__)

COMMAND_PLACEHOLDER = "Type a command (/help)..."


class VaultApp(App):
    """Terminal UI for managing stored API keys."""

    TITLE = "credvault"

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
        Binding("ctrl+c", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        config: Config | None = None,
        controller: VaultController | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.controller = controller or VaultController.from_config(config)
        self._action_task: asyncio.Task | None = None
        self._awaiting_value = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(id="log-scroll")
        yield Input(placeholder=COMMAND_PLACEHOLDER, id="command-input")
        yield StatusBar(id="status-bar")
        yield Footer()

    @property
    def status_bar(self) -> StatusBar:
        return self.query_one("#status-bar", StatusBar)

    async def on_mount(self) -> None:
        """Load catalog and keys on startup."""
        self.refresh_status()
        await self.controller.activate()

        log = self.query_one("#log-scroll")
        await log.mount(
            WelcomeBanner(
                key_count=len(self.controller.keys),
                option_count=len(self.controller.options),
            )
        )
        await self.show_feedback()
        await self.show_keys()
        self.query_one("#command-input", Input).focus()

    def refresh_status(self) -> None:
        c = self.controller
        self.status_bar.set_state(
            ready=c.phase is Phase.READY,
            key_count=len(c.keys),
            mode=c.mode,
            pending=c.pending_delete,
        )

    async def post(self, content: str, role: str = "system") -> None:
        log = self.query_one("#log-scroll")
        await log.mount(MessageDisplay(content=content, role=role))
        log.scroll_end(animate=False)

    async def show_feedback(self) -> None:
        feedback = self.controller.feedback
        if feedback is None:
            return
        log = self.query_one("#log-scroll")
        await log.mount(MessageDisplay.from_feedback(feedback))
        log.scroll_end(animate=False)
        self.controller.dismiss_feedback()

    async def show_keys(self) -> None:
        log = self.query_one("#log-scroll")
        await log.mount(KeyTable(self.controller.rows()))
        log.scroll_end(animate=False)
        self.refresh_status()

    def prompt_for_value(self) -> None:
        """Hide the input and treat the next submission as the key value."""
        input_widget = self.query_one("#command-input", Input)
        input_widget.password = True
        input_widget.placeholder = f"Value for {self.controller.resolved_key_name}"
        self._awaiting_value = True

    def _end_value_prompt(self) -> None:
        input_widget = self.query_one("#command-input", Input)
        input_widget.password = False
        input_widget.placeholder = COMMAND_PLACEHOLDER
        self._awaiting_value = False

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle a slash command, or the hidden key value after /value."""
        text = event.value
        input_widget = self.query_one("#command-input", Input)
        input_widget.value = ""

        if self._awaiting_value:
            self._end_value_prompt()
            if not self.controller.set_value(text):
                await self.post("The add form is closed; the value was discarded.", role="error")
            elif text.strip():
                await self.post("Value entered. Type /save to store it.")
            else:
                await self.post("Please enter a key value", role="error")
            return

        text = text.strip()
        if not text:
            return

        from credvault.tui.commands import handle_command

        await self.post(text, role="user")
        handled, output = await handle_command(self, text)
        if not handled:
            await self.post("Commands start with /. Type /help for the list.")
            return
        if output:
            await self.post(output)
        await self.show_feedback()
        self.refresh_status()

    async def run_save(self) -> None:
        self._action_task = asyncio.create_task(self._run(self.controller.save()))
        self.refresh_status()

    async def run_delete(self) -> None:
        self._action_task = asyncio.create_task(self._run(self.controller.confirm_delete()))
        self.refresh_status()

    async def _run(self, action) -> None:
        """Await a save/delete, then render its feedback and the refreshed keys."""
        try:
            await action
        finally:
            self._action_task = None
        if not self.controller.is_attached:
            return
        await self.show_feedback()
        await self.show_keys()

    async def action_cancel(self) -> None:
        """Escape: leave value entry, drop a pending delete, or close the form."""
        if self._awaiting_value:
            self._end_value_prompt()
            return
        if self.controller.cancel_delete() or self.controller.cancel_add():
            self.refresh_status()

    async def on_unmount(self) -> None:
        """Clean up on exit; late results are discarded by the controller."""
        await self.controller.close()
