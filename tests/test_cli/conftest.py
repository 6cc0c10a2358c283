"""Test fixtures for CLI tests."""

import logging
from collections.abc import Generator
from unittest.mock import Mock, patch

import pytest

from fwmatrix.core.logging import configure_structlog


@pytest.fixture(autouse=True)
def mock_setup_logging() -> Generator[Mock, None, None]:
    """Keep CLI invocations from replacing the root logger handlers.

    Structlog is still routed through stdlib logging so that log events never
    end up on the command's stdout.
    """
    configure_structlog(logging.WARNING)
    with patch("fwmatrix.cli.app.setup_logging") as mock_setup:
        yield mock_setup
