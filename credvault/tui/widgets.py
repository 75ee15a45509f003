"""
Custom Textual widgets for the credvault TUI.

MessageDisplay — system output and success/error feedback.
KeyTable — stored keys with service badge, masked preview and timestamp.
StatusBar — bottom bar with load state, key count and current mode.
WelcomeBanner — startup banner with key/service counts and commands hint.
"""

from __future__ import annotations

from rich.markup import escape
from textual.content import Content
from textual.widgets import Static

from credvault.controller import Feedback, KeyRow, Mode


class MessageDisplay(Static):
    """Renders a single message with role-based styling.

    Roles: user (echoed command), system, success, error.
    """

    def __init__(
        self,
        content: str = "",
        role: str = "system",
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._role = role
        self._content = content
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    @classmethod
    def from_feedback(cls, feedback: Feedback) -> MessageDisplay:
        return cls(content=escape(feedback.text), role=feedback.kind)

    def _format(self) -> str:
        if self._role == "user":
            return f"[cyan]> {self._content}[/cyan]"
        elif self._role == "success":
            return f"[green]✓ {self._content}[/green]"
        elif self._role == "error":
            return f"[red]✗ {self._content}[/red]"
        else:
            return f"[dim italic]{self._content}[/dim italic]"


class KeyTable(Static):
    """Table of stored keys. Never shows more than the masked preview."""

    DEFAULT_CSS = """
    KeyTable {
        margin: 0 0 0 2;
        height: auto;
    }
    """

    def __init__(
        self,
        rows: list[KeyRow] | None = None,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._rows = rows or []
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        if not self._rows:
            return "[dim]No API keys configured yet. Type /add to get started.[/dim]"

        lines = [f"[bold]{'Key':<32} {'Service':<16} {'Preview':<20} Updated[/bold]"]
        for row in self._rows:
            service = row.service_label or "-"
            line = (
                f"{escape(row.key_name):<32} {escape(service):<16} "
                f"{escape(row.preview):<20} {escape(row.updated)}"
            )
            if row.deleting:
                line += " [red]deleting...[/red]"
            lines.append(line)
        return "\n".join(lines)

    def update_rows(self, rows: list[KeyRow]) -> None:
        self._rows = rows
        self.update(Content.from_markup(self._format()))


class StatusBar(Static):
    """Bottom status bar showing load state, key count and mode."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._ready = False
        self._key_count = 0
        self._mode: Mode = Mode.IDLE
        self._pending: str | None = None
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        if self._ready:
            status = "[green]●[/green] ready"
        else:
            status = "[yellow]●[/yellow] loading"

        parts = [status, f"{self._key_count} key{'s' if self._key_count != 1 else ''}"]

        if self._mode is Mode.ADD_FORM_OPEN:
            parts.append("adding key")
        elif self._mode is Mode.SAVING:
            parts.append("[yellow]saving...[/yellow]")
        elif self._mode is Mode.CONFIRM_DELETE:
            parts.append(f"[red]delete {self._pending}? /confirm or /cancel[/red]")
        elif self._mode is Mode.DELETING:
            parts.append(f"[yellow]deleting {self._pending}...[/yellow]")

        return " | ".join(parts)

    def set_state(
        self,
        ready: bool,
        key_count: int = 0,
        mode: Mode = Mode.IDLE,
        pending: str | None = None,
    ) -> None:
        self._ready = ready
        self._key_count = key_count
        self._mode = mode
        self._pending = pending
        self.update(Content.from_markup(self._format()))


class WelcomeBanner(Static):
    """Startup banner with key and service counts."""

    DEFAULT_CSS = """
    WelcomeBanner {
        margin: 1 2;
        padding: 1 2;
        border: solid $accent;
        height: auto;
    }
    """

    def __init__(
        self,
        key_count: int = 0,
        option_count: int = 0,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        text = (
            "[bold]credvault[/bold]\n\n"
            f"{key_count} API key{'s' if key_count != 1 else ''} stored, "
            f"{option_count} known service key{'s' if option_count != 1 else ''}.\n"
            "Type [dim]/add[/dim] to add a key, or [dim]/help[/dim] for commands."
        )
        super().__init__(
            Content.from_markup(text),
            name=name,
            id=id,
            classes=classes,
        )
