"""Helper functions for CLI output formatting with Rich integration."""

import json
from typing import Any

from fwmatrix.cli.helpers.theme import Icons, get_themed_console


def print_success_message(
    message: str, use_rich: bool = True, icon_mode: str = "emoji"
) -> None:
    """Print a success message with a checkmark.

    Args:
        message: The message to print
        use_rich: Whether to use Rich formatting (default: True)
        icon_mode: Icon mode - "emoji" or "text"
    """
    if use_rich:
        get_themed_console(icon_mode=icon_mode).print_success(message)
    else:
        print(Icons.format_with_icon("SUCCESS", message, icon_mode))


def print_error_message(
    message: str, use_rich: bool = True, icon_mode: str = "emoji"
) -> None:
    """Print an error message with an X symbol."""
    if use_rich:
        get_themed_console(icon_mode=icon_mode).print_error(message)
    else:
        print(Icons.format_with_icon("ERROR", message, icon_mode))


def print_json(data: Any) -> None:
    """Print ``data`` as indented JSON on stdout, without Rich markup."""
    print(json.dumps(data, indent=2))
