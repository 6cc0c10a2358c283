"""Helper utilities for CLI output."""

from fwmatrix.cli.helpers.output import (
    print_error_message,
    print_json,
    print_success_message,
)


__all__ = [
    "print_error_message",
    "print_json",
    "print_success_message",
]
