"""Load matrix definitions from YAML files.

Two layouts are understood:

* a standalone matrix file with a top-level ``matrix`` block plus optional
  ``routing-attributes`` and ``allow-failure`` lists;
* a GitHub Actions workflow, where the matrix lives under
  ``jobs.<job_id>.strategy.matrix`` and ``continue-on-error`` on the job
  becomes an allow-failure rule.
"""

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from fwmatrix.core.errors import MatrixDefinitionError
from fwmatrix.matrix.models import MatrixConfig, MatrixDefinition


logger = logging.getLogger(__name__)

EXPRESSION_PATTERN = re.compile(r"^\$\{\{\s*(?P<body>.*?)\s*\}\}$", re.DOTALL)
MATRIX_EQUALITY_PATTERN = re.compile(
    r"^matrix\.(?P<axis>[\w-]+)\s*==\s*(?P<quote>['\"])(?P<value>.*)(?P=quote)$"
)


def _load_yaml(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError as e:
        raise MatrixDefinitionError("file not found", path) from e
    except OSError as e:
        raise MatrixDefinitionError(f"cannot read file: {e}", path) from e
    except yaml.YAMLError as e:
        raise MatrixDefinitionError(f"invalid YAML: {e}", path) from e


def parse_continue_on_error(value: Any) -> list[dict[str, str]]:
    """Translate a ``continue-on-error`` value into allow-failure rules.

    Supports literal booleans and expressions made of ``matrix.<axis> ==
    '<value>'`` comparisons joined with ``&&``.

    Raises:
        ValueError: If the expression uses anything else
    """
    if value is None or value is False:
        return []
    if value is True:
        return [{}]

    text = str(value).strip()
    match = EXPRESSION_PATTERN.match(text)
    body = match.group("body") if match else text

    if body.lower() == "true":
        return [{}]
    if body.lower() == "false":
        return []

    rule: dict[str, str] = {}
    for clause in body.split("&&"):
        clause_match = MATRIX_EQUALITY_PATTERN.match(clause.strip())
        if not clause_match:
            raise ValueError(f"unsupported continue-on-error expression: {text}")
        rule[clause_match.group("axis")] = clause_match.group("value")
    return [rule]


def _select_workflow_job(
    jobs: Mapping[str, Any], job_id: str | None, path: Path
) -> tuple[str, Mapping[str, Any]]:
    if job_id is not None:
        job = jobs.get(job_id)
        if not isinstance(job, Mapping):
            raise MatrixDefinitionError(f"workflow has no job '{job_id}'", path)
        return job_id, job

    candidates = [
        name
        for name, job in jobs.items()
        if isinstance(job, Mapping)
        and isinstance(job.get("strategy"), Mapping)
        and "matrix" in job["strategy"]
    ]
    if len(candidates) != 1:
        found = ", ".join(candidates) if candidates else "none"
        raise MatrixDefinitionError(
            f"expected exactly one job with a build matrix (found: {found}); "
            "select one with --job",
            path,
        )
    return candidates[0], jobs[candidates[0]]


def _workflow_to_config_data(
    workflow: Mapping[str, Any], job_id: str | None, path: Path
) -> dict[str, Any]:
    jobs = workflow.get("jobs")
    if not isinstance(jobs, Mapping):
        raise MatrixDefinitionError("workflow 'jobs' must be a mapping", path)

    name, job = _select_workflow_job(jobs, job_id, path)
    strategy = job.get("strategy")
    if not isinstance(strategy, Mapping) or "matrix" not in strategy:
        raise MatrixDefinitionError(f"job '{name}' has no strategy.matrix", path)

    try:
        allow_failure = parse_continue_on_error(job.get("continue-on-error"))
    except ValueError as e:
        raise MatrixDefinitionError(str(e), path) from e

    logger.debug("Using matrix of workflow job '%s'", name)
    return {"matrix": strategy["matrix"], "allow-failure": allow_failure}


def load_matrix_config(path: Path, job_id: str | None = None) -> MatrixConfig:
    """Read and validate the raw matrix declaration in ``path``.

    Raises:
        MatrixDefinitionError: If the file cannot be read or is malformed
    """
    data = _load_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise MatrixDefinitionError("top level must be a mapping", path)

    if "jobs" in data:
        data = _workflow_to_config_data(data, job_id, path)
    elif job_id is not None:
        raise MatrixDefinitionError(
            f"--job '{job_id}' given but file is not a workflow", path
        )
    elif "matrix" not in data:
        raise MatrixDefinitionError("no 'matrix' block found", path)

    try:
        return MatrixConfig.model_validate(data)
    except ValidationError as e:
        raise MatrixDefinitionError(f"invalid matrix: {e}", path) from e


def load_matrix_definition(path: Path, job_id: str | None = None) -> MatrixDefinition:
    """Load a matrix definition from a standalone matrix file or a workflow.

    Args:
        path: YAML file to read
        job_id: Workflow job holding the matrix, required when several do

    Returns:
        MatrixDefinition: Validated definition

    Raises:
        MatrixDefinitionError: If the file cannot be read or is malformed
        UnknownAxisError: If an exclude or allow-failure rule names an
            undeclared axis
    """
    config = load_matrix_config(path, job_id)
    definition = MatrixDefinition.from_config(config)
    logger.debug(
        "Loaded matrix from %s: %d axes, %d include, %d exclude rules",
        path,
        len(definition.axis_set),
        len(definition.include),
        len(definition.exclude),
    )
    return definition
