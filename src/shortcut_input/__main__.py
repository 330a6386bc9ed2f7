"""shortcut-input CLI entrypoint."""

from __future__ import annotations

from shortcut_input.cli import app

if __name__ == "__main__":
    app()
