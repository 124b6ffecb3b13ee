"""Entry point for ``python -m reelmatch``."""

from __future__ import annotations

from reelmatch.cli.typer_app import app

if __name__ == "__main__":
    app()
