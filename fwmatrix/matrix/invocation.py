"""Build invocation planning for resolved jobs.

Nothing here runs a compiler. The planner only renders what the external
build system should execute for each job: the toolchain channel, the lint
and build command lines and the category under which reports are filed.
"""

import logging
from collections.abc import Sequence

from pydantic import Field

from fwmatrix.config.settings import MatrixSettings
from fwmatrix.matrix.models import ResolvedJob
from fwmatrix.models.base import FwMatrixBaseModel


logger = logging.getLogger(__name__)


class BuildInvocation(FwMatrixBaseModel):
    """Commands and toolchain selection for one resolved job."""

    job: ResolvedJob
    toolchain: str
    vendor_toolchain: bool = False
    vendor_build_targets: str | None = None
    lint_command: list[str] = Field(default_factory=list)
    build_command: list[str] = Field(default_factory=list)
    report_category: str
    allow_failure: bool = False


class InvocationPlanner:
    """Render build invocations from resolved jobs."""

    def __init__(self, settings: MatrixSettings | None = None) -> None:
        self.settings = settings or MatrixSettings()

    def select_toolchain(self, target_triple: str) -> tuple[str, bool]:
        """Pick the toolchain channel for ``target_triple``.

        Returns:
            Channel name and whether it is a vendor toolchain
        """
        for prefix, channel in self.settings.vendor_toolchains.items():
            if target_triple.startswith(prefix):
                return channel, True
        return self.settings.default_toolchain, False

    def _cargo(self, subcommand: str, job: ResolvedJob) -> list[str]:
        command = [
            self.settings.cargo_command,
            subcommand,
            "--target",
            job.target_triple,
            "--no-default-features",
        ]
        if job.features:
            command.extend(["--features", job.features])
        return command

    def plan(self, job: ResolvedJob) -> BuildInvocation:
        toolchain, vendor = self.select_toolchain(job.target_triple)
        return BuildInvocation(
            job=job,
            toolchain=toolchain,
            vendor_toolchain=vendor,
            vendor_build_targets=job.vendor_alias if vendor else None,
            lint_command=[*self._cargo("clippy", job), "--message-format=json"],
            build_command=self._cargo("build", job),
            report_category=job.features,
            allow_failure=job.allow_failure,
        )

    def plan_all(self, jobs: Sequence[ResolvedJob]) -> list[BuildInvocation]:
        invocations = [self.plan(job) for job in jobs]
        logger.debug(
            "Planned %d invocations, %d on vendor toolchains",
            len(invocations),
            sum(1 for i in invocations if i.vendor_toolchain),
        )
        return invocations
