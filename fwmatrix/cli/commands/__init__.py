"""CLI command modules."""

import typer

from fwmatrix.cli.commands.matrix import register_commands as register_matrix_commands


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    register_matrix_commands(app)
