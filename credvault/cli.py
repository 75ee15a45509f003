"""
credvault CLI — manage the API keys attached to an agent runtime.

Usage:
    credvault list                     # Stored keys (masked previews)
    credvault services                 # Known services and their key names
    credvault set OPENAI_API_KEY       # Add or replace a key (prompts for the value)
    credvault set "my token" --value x # Custom names are normalized (MYTOKEN)
    credvault delete OPENAI_API_KEY    # Remove a key (asks for confirmation)
    credvault tui                      # Interactive terminal UI
    credvault version                  # Show version
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from dataclasses import replace
from pathlib import Path

from credvault.catalog.resolver import CustomKey, KnownKey
from credvault.config import Config, get_config
from credvault.controller import Feedback, VaultController


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="credvault",
        description="credvault — attach external service API keys to an agent runtime.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("--url", type=str, help="Key store URL (default: $CREDVAULT_URL)")
    parser.add_argument("--catalog", type=str, help="Service catalog YAML file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="List stored API keys")
    subparsers.add_parser("services", help="List known services and their key names")

    set_parser = subparsers.add_parser("set", help="Add or replace an API key")
    set_parser.add_argument("name", help="Catalog key name, or a custom name")
    set_parser.add_argument("--value", type=str, help="Key value (prompted if omitted)")

    delete_parser = subparsers.add_parser("delete", help="Delete an API key")
    delete_parser.add_argument("name", help="Key name")
    delete_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    subparsers.add_parser("tui", help="Interactive terminal UI")
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from credvault import __version__

        print(f"credvault {__version__}")
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    config = _config_from_args(args)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level_value,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "tui":
        return _cmd_tui(config)
    return asyncio.run(_run(args, config))


def _config_from_args(args: argparse.Namespace) -> Config:
    config = get_config()
    if args.url:
        config = replace(config, base_url=args.url)
    if args.catalog:
        config = replace(config, catalog_file=Path(args.catalog).expanduser())
    return config


async def _run(args: argparse.Namespace, config: Config) -> int:
    controller = VaultController.from_config(config)
    try:
        await controller.activate()
        if args.command == "list":
            return _cmd_list(controller)
        elif args.command == "services":
            return _cmd_services(controller)
        elif args.command == "set":
            return await _cmd_set(controller, args.name, args.value)
        elif args.command == "delete":
            return await _cmd_delete(controller, args.name, args.yes)
        return 1
    finally:
        await controller.close()


def _print_feedback(feedback: Feedback | None) -> None:
    if feedback is None:
        return
    if feedback.is_error:
        print(f"Error: {feedback.text}", file=sys.stderr)
    else:
        print(feedback.text)


def _cmd_list(controller: VaultController) -> int:
    # Load failures leave the list empty; report them instead of "no keys"
    if controller.feedback is not None and controller.feedback.is_error and not controller.keys:
        _print_feedback(controller.feedback)
        return 1

    rows = controller.rows()
    if not rows:
        print("No API keys configured yet. Add one with: credvault set NAME")
        return 0

    print(f"{'Key':<32} {'Service':<16} {'Preview':<20} {'Updated'}")
    print("─" * 80)
    for row in rows:
        print(f"{row.key_name:<32} {row.service_label or '-':<16} {row.preview:<20} {row.updated}")
    return 0


def _cmd_services(controller: VaultController) -> int:
    options = controller.options
    if not options:
        _print_feedback(controller.feedback)
        print("No known services. Custom key names can still be used with: credvault set NAME")
        return 0

    current = None
    for opt in options:
        if opt.service_label != current:
            current = opt.service_label
            print(f"\n{opt.service_label}")
            if opt.description:
                print(f"  {opt.description}")
            if opt.url:
                print(f"  Get key: {opt.url}")
        print(f"    {opt.key_name}")
    return 0


async def _cmd_set(controller: VaultController, name: str, value: str | None) -> int:
    controller.open_add_form()
    selection = KnownKey(name) if name in controller.index else CustomKey(name)
    controller.select(selection)

    key_name = controller.resolved_key_name
    if not key_name:
        print(f"Error: {name!r} is not a usable key name", file=sys.stderr)
        return 1
    if key_name != name:
        print(f"Using key name {key_name}")
    option = controller.selected_option
    if option is not None and option.url:
        print(f"{option.service_label}: get a key at {option.url}")

    if value is None:
        value = getpass.getpass(f"Value for {key_name}: ")
    controller.set_value(value)

    saved = await controller.save()
    _print_feedback(controller.feedback)
    return 0 if saved else 1


async def _cmd_delete(controller: VaultController, name: str, assume_yes: bool) -> int:
    if not controller.request_delete(name):
        _print_feedback(controller.feedback)
        print(f"Error: {name} not found", file=sys.stderr)
        return 1

    if not assume_yes:
        answer = input(f"Delete {name}? [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            controller.cancel_delete()
            print("Cancelled.")
            return 0

    deleted = await controller.confirm_delete()
    _print_feedback(controller.feedback)
    return 0 if deleted else 1


def _cmd_tui(config: Config) -> int:
    from credvault.tui import check_textual

    if not check_textual():
        print("Error: textual is required. Install with: pip install credvault[tui]")
        return 1

    from credvault.tui.app import VaultApp

    VaultApp(config=config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
