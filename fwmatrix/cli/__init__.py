"""Command-line interface for fwmatrix using Typer."""

from fwmatrix.cli.app import app, main
from fwmatrix.cli.commands import register_all_commands


register_all_commands(app)

__all__ = ["app", "main"]
