"""Tests for the main VaultApp — Textual pilot tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from credvault.config import Config
from credvault.tui import check_textual
from credvault.tui.app import VaultApp
from credvault.tui.widgets import KeyTable, MessageDisplay, WelcomeBanner


class TestAppInit:
    def test_uses_given_controller(self, vault_controller):
        app = VaultApp(controller=vault_controller)
        assert app.controller is vault_controller

    def test_builds_controller_from_config(self):
        app = VaultApp(config=Config(base_url="http://localhost:9999"))
        assert "localhost:9999" in app.controller.store.client.base_url


class TestAppPilot:
    @pytest.mark.asyncio
    async def test_startup_shows_banner_and_keys(self, vault_controller, fake_store):
        fake_store.seed("OPENAI_API_KEY", "sk-test-123")
        app = VaultApp(controller=vault_controller)

        async with app.run_test() as _pilot:
            assert len(app.query(WelcomeBanner)) == 1
            tables = app.query(KeyTable)
            assert len(tables) == 1
            assert "OPENAI_API_KEY" in tables.first()._format()
            assert "ready" in app.status_bar._format()

    @pytest.mark.asyncio
    async def test_load_failure_shows_error(self, vault_controller, fake_store):
        fake_store.failing.add("list_keys")
        app = VaultApp(controller=vault_controller)

        async with app.run_test() as _pilot:
            errors = [m for m in app.query(MessageDisplay) if m._role == "error"]
            assert len(errors) == 1

    @pytest.mark.asyncio
    async def test_help_command(self, vault_controller):
        app = VaultApp(controller=vault_controller)

        async with app.run_test() as pilot:
            input_widget = app.query_one("#command-input")
            input_widget.value = "/help"
            await pilot.press("enter")
            await pilot.pause()

            system_msgs = [m for m in app.query(MessageDisplay) if m._role == "system"]
            assert any("/confirm" in m._content for m in system_msgs)

    @pytest.mark.asyncio
    async def test_value_entry_is_hidden(self, vault_controller, fake_store):
        """After /value the input is masked and the text becomes the key value."""
        app = VaultApp(controller=vault_controller)

        async with app.run_test() as pilot:
            input_widget = app.query_one("#command-input")
            for command in ("/add", "/select GITHUB_TOKEN", "/value"):
                input_widget.value = command
                await pilot.press("enter")
                await pilot.pause()

            assert input_widget.password is True

            input_widget.value = "ghp-abcdefgh-123"
            await pilot.press("enter")
            await pilot.pause()

            assert input_widget.password is False
            assert app.controller.form.value == "ghp-abcdefgh-123"
            echoed = [m._content for m in app.query(MessageDisplay) if m._role == "user"]
            assert "ghp-abcdefgh-123" not in echoed

            input_widget.value = "/save"
            await pilot.press("enter")
            await pilot.pause()
            if app._action_task is not None:
                await app._action_task
            await pilot.pause()

            assert "GITHUB_TOKEN" in fake_store.records

    @pytest.mark.asyncio
    async def test_value_after_form_closed_is_discarded(self, vault_controller):
        app = VaultApp(controller=vault_controller)

        async with app.run_test() as pilot:
            input_widget = app.query_one("#command-input")
            for command in ("/add", "/select GITHUB_TOKEN", "/value"):
                input_widget.value = command
                await pilot.press("enter")
                await pilot.pause()

            app.controller.cancel_add()
            input_widget.value = "ghp-abcdefgh-123"
            await pilot.press("enter")
            await pilot.pause()

            assert app.controller.form.value == ""
            system_msgs = [m._content for m in app.query(MessageDisplay) if m._role == "system"]
            assert not any("Value entered" in c for c in system_msgs)
            errors = [m._content for m in app.query(MessageDisplay) if m._role == "error"]
            assert any("discarded" in c for c in errors)

    @pytest.mark.asyncio
    async def test_unmount_closes_controller(self, vault_controller, fake_store):
        app = VaultApp(controller=vault_controller)

        async with app.run_test() as _pilot:
            pass

        assert vault_controller.is_attached is False
        assert fake_store.closed is True


class TestCheckTextual:
    def test_installed(self):
        assert check_textual() is True

    def test_missing(self):
        with patch("credvault.tui.importlib.util.find_spec", return_value=None):
            assert check_textual() is False
