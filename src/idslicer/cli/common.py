"""Helpers shared by the CLI commands."""

from __future__ import annotations

from typing import NoReturn

import click


def fail(message: str) -> NoReturn:
    """Print *message* as an error and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)
