"""Main CLI application for fwmatrix."""

import logging
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Annotated

import typer

from fwmatrix.cli.decorators.error_handling import print_stack_trace_if_verbose
from fwmatrix.cli.helpers.output import print_error_message
from fwmatrix.config.settings import MatrixSettings, create_settings
from fwmatrix.core.errors import ConfigError
from fwmatrix.core.logging import setup_logging


__all__ = ["AppContext", "app", "main"]

try:
    __version__ = package_version("fwmatrix")
except PackageNotFoundError:
    __version__ = "0.0.0"

logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
        no_emoji: bool = False,
        settings: MatrixSettings | None = None,
    ):
        """Initialize AppContext.

        Args:
            verbose: Verbosity level
            log_file: Path to log file
            config_file: Path to configuration file
            no_emoji: Whether to disable emoji icons
            settings: Pre-built settings, loaded from ``config_file`` otherwise
        """
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file
        self.no_emoji = no_emoji
        self.settings = settings or create_settings(config_file)

    @property
    def icon_mode(self) -> str:
        return "text" if self.no_emoji else "emoji"


app = typer.Typer(
    name="fwmatrix",
    help=f"""fwmatrix firmware build matrix resolver v{__version__}

Expands matrix axes, applies include and exclude rules and renders the
feature set and target of every firmware build job.

Common workflows:
  • List jobs:        fwmatrix resolve .github/workflows/firmware-ci.yml
  • Dynamic matrix:   fwmatrix resolve matrix.yaml --format github
  • Build commands:   fwmatrix plan matrix.yaml --format shell""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    no_emoji: Annotated[
        bool,
        typer.Option("--no-emoji", help="Disable emoji icons in output"),
    ] = False,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """fwmatrix firmware build matrix resolver."""
    if version:
        print(f"fwmatrix v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    try:
        app_context = AppContext(
            verbose=verbose,
            log_file=log_file,
            config_file=config_file,
            no_emoji=no_emoji,
        )
    except ConfigError as e:
        print_error_message(f"Configuration error: {e}")
        print_stack_trace_if_verbose()
        raise typer.Exit(1) from e
    ctx.obj = app_context

    settings = app_context.settings
    if debug or verbose >= 2:
        log_level_name = "DEBUG"
    elif verbose == 1:
        log_level_name = "INFO"
    else:
        log_level_name = settings.log_level

    setup_logging(
        json_logs=settings.json_logs,
        log_level_name=log_level_name,
        log_file=log_file or settings.log_file,
    )


def main() -> int:
    """Main CLI entry point."""
    exit_code = 0

    try:
        app()
    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else 0
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        exit_code = 1

    return exit_code
