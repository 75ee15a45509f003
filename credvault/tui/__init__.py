"""
credvault TUI — terminal front end for the API key vault.

Requires the optional `tui` dependency group:
    pip install credvault[tui]
"""

from __future__ import annotations

import importlib.util


def check_textual() -> bool:
    """True when the optional textual dependency can be imported."""
    return importlib.util.find_spec("textual") is not None
