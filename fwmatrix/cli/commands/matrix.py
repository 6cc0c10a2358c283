"""Matrix commands (resolve, validate, axes, plan)."""

import json
import shlex
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from fwmatrix.cli.app import AppContext
from fwmatrix.cli.decorators import handle_errors
from fwmatrix.cli.helpers import print_json, print_success_message
from fwmatrix.cli.helpers.theme import FWMATRIX_THEME, TableStyles
from fwmatrix.core.structlog_logger import get_struct_logger
from fwmatrix.matrix import (
    InvocationPlanner,
    ResolvedJob,
    create_matrix_resolver,
    load_matrix_definition,
)


logger = get_struct_logger(__name__)


class JobFormat(str, Enum):
    """Output formats for resolved jobs."""

    TABLE = "table"
    JSON = "json"
    RECORDS = "records"
    GITHUB = "github"


class AxesFormat(str, Enum):
    """Output formats for the axes overview."""

    TABLE = "table"
    JSON = "json"


class PlanFormat(str, Enum):
    """Output formats for build plans."""

    TABLE = "table"
    JSON = "json"
    SHELL = "shell"


MatrixFileArgument = Annotated[
    Path,
    typer.Argument(
        help="Matrix file or GitHub Actions workflow",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
]
JobOption = Annotated[
    str | None,
    typer.Option("--job", "-j", help="Workflow job holding the matrix"),
]


def _write_or_print(data: Any, output: Path | None) -> None:
    if output is None:
        print_json(data)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    logger.info("output_written", path=str(output))


def format_jobs(jobs: list[ResolvedJob], output_format: JobFormat) -> Any:
    """Serialize resolved jobs for one of the machine-readable formats."""
    if output_format == JobFormat.RECORDS:
        return [job.to_record() for job in jobs]
    if output_format == JobFormat.GITHUB:
        return {"include": [job.to_matrix_entry() for job in jobs]}
    return [job.to_dict() for job in jobs]


def _print_job_table(
    jobs: list[ResolvedJob], axis_names: list[str], icon_mode: str
) -> None:
    table = TableStyles.create_job_table(axis_names, icon_mode)
    for index, job in enumerate(jobs, start=1):
        table.add_row(
            str(index),
            *[job.values.get(name, "-") for name in axis_names],
            job.target_triple,
            job.features,
            "yes" if job.allow_failure else "",
        )
    Console(theme=FWMATRIX_THEME).print(table)


@handle_errors
def resolve_matrix(
    ctx: typer.Context,
    matrix_file: MatrixFileArgument,
    job: JobOption = None,
    output_format: Annotated[
        JobFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = JobFormat.TABLE,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write JSON output to a file"),
    ] = None,
) -> None:
    """Resolve the build matrix and list every job."""
    app_ctx: AppContext = ctx.obj
    definition = load_matrix_definition(matrix_file, job)
    jobs = create_matrix_resolver(app_ctx.settings).resolve(definition)
    logger.info("matrix_resolved", path=str(matrix_file), jobs=len(jobs))

    if output_format == JobFormat.TABLE and output is None:
        _print_job_table(jobs, list(definition.axis_set.names), app_ctx.icon_mode)
        return

    if output_format == JobFormat.TABLE:
        output_format = JobFormat.JSON
    _write_or_print(format_jobs(jobs, output_format), output)


@handle_errors
def validate_matrix(
    ctx: typer.Context,
    matrix_file: MatrixFileArgument,
    job: JobOption = None,
) -> None:
    """Check that the matrix resolves without errors."""
    app_ctx: AppContext = ctx.obj
    jobs = create_matrix_resolver(app_ctx.settings).resolve_from_file(matrix_file, job)
    print_success_message(
        f"Matrix is valid: {len(jobs)} jobs", icon_mode=app_ctx.icon_mode
    )


@handle_errors
def show_axes(
    ctx: typer.Context,
    matrix_file: MatrixFileArgument,
    job: JobOption = None,
    output_format: Annotated[
        AxesFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = AxesFormat.TABLE,
) -> None:
    """Show declared axes and rule counts."""
    app_ctx: AppContext = ctx.obj
    definition = load_matrix_definition(matrix_file, job)
    axis_set = definition.axis_set

    if output_format == AxesFormat.JSON:
        print_json(
            {
                "axes": {axis.name: list(axis.values) for axis in axis_set},
                "combinations": axis_set.size,
                "include_rules": len(definition.include),
                "exclude_rules": len(definition.exclude),
            }
        )
        return

    table = TableStyles.create_axis_table(app_ctx.icon_mode)
    for axis in axis_set:
        table.add_row(axis.name, ", ".join(axis.values), str(len(axis)))
    console = Console(theme=FWMATRIX_THEME)
    console.print(table)
    console.print(
        f"{axis_set.size} combinations, {len(definition.include)} include rules, "
        f"{len(definition.exclude)} exclude rules",
        style="muted",
    )


@handle_errors
def plan_builds(
    ctx: typer.Context,
    matrix_file: MatrixFileArgument,
    job: JobOption = None,
    output_format: Annotated[
        PlanFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = PlanFormat.TABLE,
) -> None:
    """Render toolchain selection and build commands for every job."""
    app_ctx: AppContext = ctx.obj
    jobs = create_matrix_resolver(app_ctx.settings).resolve_from_file(matrix_file, job)
    invocations = InvocationPlanner(app_ctx.settings).plan_all(jobs)

    if output_format == PlanFormat.JSON:
        print_json([invocation.to_dict() for invocation in invocations])
        return

    if output_format == PlanFormat.SHELL:
        for invocation in invocations:
            print(f"# {invocation.job.name} ({invocation.toolchain})")
            print(shlex.join(invocation.lint_command))
            print(shlex.join(invocation.build_command))
        return

    table = TableStyles.create_plan_table(app_ctx.icon_mode)
    for invocation in invocations:
        table.add_row(
            invocation.job.name,
            invocation.toolchain,
            shlex.join(invocation.build_command),
        )
    Console(theme=FWMATRIX_THEME).print(table)


def register_commands(app: typer.Typer) -> None:
    """Register matrix commands with the main app.

    Args:
        app: The main Typer app
    """
    app.command(name="resolve")(resolve_matrix)
    app.command(name="validate")(validate_matrix)
    app.command(name="axes")(show_axes)
    app.command(name="plan")(plan_builds)
