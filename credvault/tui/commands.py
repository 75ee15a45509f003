"""
Slash command registry for the credvault TUI.

Each command maps onto one VaultController action. Handlers return markup
to show in the message log, or None when the app renders the outcome itself
(controller feedback and the key table).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from credvault.catalog.resolver import CustomKey, KnownKey

if TYPE_CHECKING:
    from credvault.tui.app import VaultApp

# Command registry: name → (handler_name, description)
COMMANDS: dict[str, tuple[str, str]] = {
    "/keys": ("cmd_keys", "Show stored keys"),
    "/services": ("cmd_services", "List known services and key names"),
    "/add": ("cmd_add", "Open the add-key form"),
    "/select": ("cmd_select", "Choose a catalog key name for the form"),
    "/custom": ("cmd_custom", "Use a custom key name for the form"),
    "/value": ("cmd_value", "Enter the key value (input is hidden)"),
    "/save": ("cmd_save", "Save the key in the form"),
    "/cancel": ("cmd_cancel", "Close the form or cancel a pending delete"),
    "/delete": ("cmd_delete", "Delete a key (asks for /confirm)"),
    "/confirm": ("cmd_confirm", "Confirm the pending delete"),
    "/refresh": ("cmd_refresh", "Reload stored keys"),
    "/help": ("cmd_help", "Show available commands"),
    "/quit": ("cmd_quit", "Exit the TUI"),
    "/exit": ("cmd_quit", "Exit the TUI"),
}

BUSY = "[yellow]Another save or delete is still running.[/yellow]"


async def handle_command(app: VaultApp, text: str) -> tuple[bool, str | None]:
    """Dispatch a slash command to its cmd_* handler.

    Returns (False, None) when text is not a slash command at all; otherwise
    (True, output) where output is the handler's markup or None.
    """
    name, _, args = text.strip().partition(" ")
    if not name.startswith("/"):
        return False, None

    entry = COMMANDS.get(name.lower())
    if entry is None:
        return True, f"Unknown command: {escape(name)}. Type /help for available commands."

    handler = globals()[entry[0]]
    return True, await handler(app, args.strip())


async def cmd_keys(app: VaultApp, args: str) -> str | None:
    """Show the key table."""
    await app.show_keys()
    return None


async def cmd_services(app: VaultApp, args: str) -> str:
    """List catalog options."""
    options = app.controller.options
    if not options:
        return "No known services. Use /custom NAME to add any key."

    lines = ["[bold]Known service keys[/bold]"]
    for opt in options:
        lines.append(f"  {escape(opt.key_name):<32} {escape(opt.service_label)}")
    return "\n".join(lines)


async def cmd_add(app: VaultApp, args: str) -> str:
    """Open the add form."""
    if app.controller.busy:
        return BUSY
    if not app.controller.open_add_form():
        return "Finish or /cancel the current action first."
    return "Adding a key: /select KEY_NAME or /custom NAME, then /value and /save."


async def cmd_select(app: VaultApp, args: str) -> str | None:
    """Pick a catalog key for the form."""
    name = args.strip()
    if not name:
        return "Usage: /select KEY_NAME (see /services)"
    if not app.controller.select(KnownKey(name)):
        return None if app.controller.feedback else "Open the form with /add first."

    option = app.controller.selected_option
    lines = [f"Selected [bold]{escape(name)}[/bold]"]
    if option is not None:
        if option.description:
            lines.append(escape(option.description))
        if option.url:
            lines.append(f"Get key: {escape(option.url)}")
    return "\n".join(lines)


async def cmd_custom(app: VaultApp, args: str) -> str:
    """Use a custom key name for the form."""
    if not app.controller.select(CustomKey(args)):
        return "Open the form with /add first."
    resolved = app.controller.resolved_key_name
    if not resolved:
        return "Usage: /custom NAME (uppercase letters, digits, and underscores)"
    return f"Key name: [bold]{resolved}[/bold]"


async def cmd_value(app: VaultApp, args: str) -> str:
    """Switch the input to hidden entry for the key value."""
    if app.controller.busy:
        return BUSY
    if app.controller.form.selection is None or not app.controller.resolved_key_name:
        return "Choose a key name first with /select or /custom."
    app.prompt_for_value()
    return f"Enter the value for {app.controller.resolved_key_name}."


async def cmd_save(app: VaultApp, args: str) -> str | None:
    """Save the form's key."""
    if app.controller.busy:
        return BUSY
    await app.run_save()
    return None


async def cmd_cancel(app: VaultApp, args: str) -> str:
    """Close the form or drop a pending delete."""
    if app.controller.cancel_delete():
        return "Delete cancelled."
    if app.controller.cancel_add():
        return "Add cancelled."
    return "Nothing to cancel."


async def cmd_delete(app: VaultApp, args: str) -> str:
    """Request deletion of a key; it is removed only after /confirm."""
    name = args.strip()
    if not name:
        return "Usage: /delete KEY_NAME"
    if app.controller.busy:
        return BUSY
    if not app.controller.request_delete(name):
        if name not in app.controller.store:
            return f"{escape(name)} is not a stored key."
        return "Finish or /cancel the current action first."
    return f"[red]Delete {escape(name)}?[/red] Type /confirm to delete or /cancel to keep it."


async def cmd_confirm(app: VaultApp, args: str) -> str | None:
    """Run the pending delete."""
    if app.controller.busy:
        return BUSY
    if app.controller.pending_delete is None:
        return "No delete is waiting for confirmation."
    await app.run_delete()
    return None


async def cmd_refresh(app: VaultApp, args: str) -> str | None:
    """Reload the key list."""
    if app.controller.busy:
        return BUSY
    await app.controller.refresh()
    await app.show_keys()
    return None


async def cmd_help(app: VaultApp, args: str) -> str:
    """Show available commands."""
    lines = ["[bold]Available Commands[/bold]", ""]
    for cmd, (_, desc) in COMMANDS.items():
        if cmd == "/exit":
            continue  # Skip alias
        lines.append(f"  {cmd:<12} {desc}")
    return "\n".join(lines)


async def cmd_quit(app: VaultApp, args: str) -> str:
    """Exit the TUI."""
    app.exit()
    return ""
