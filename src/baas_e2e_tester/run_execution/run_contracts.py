"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from baas_e2e_tester.configuration import Configuration, HarnessSettings
from baas_e2e_tester.session_bootstrap import SessionArtifact
from baas_e2e_tester.suite_definition import TestGroup
from baas_e2e_tester.workflow_sequencing import GroupResult, GroupStatus

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


@dataclass(frozen=True)
class RunRequest:  # pylint: disable=too-many-instance-attributes
    """Input contract for executing one suite run."""

    config_path: str | None = None
    group_names: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    workers: int | None = None
    output_dir: str | None = None
    session_file: str | None = None
    reuse_session: bool = False
    headless: bool | None = None


@dataclass(frozen=True)
class RunnableGroup:
    """A selected group whose required configuration resolved."""

    group: TestGroup
    configuration: Configuration


@dataclass(frozen=True)
class RunPlan:
    """Gated selection of groups for one run."""

    settings: HarnessSettings
    runnable: tuple[RunnableGroup, ...]
    skipped: tuple[GroupResult, ...]
    order: tuple[str, ...]

    @property
    def needs_session(self) -> bool:
        return any(item.group.needs_session for item in self.runnable)


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed suite run."""

    group_results: tuple[GroupResult, ...]
    report_path: Path | None
    session: SessionArtifact | None = None
    cancelled: bool = False

    @property
    def passed(self) -> int:
        return self._count(GroupStatus.PASSED)

    @property
    def failed(self) -> int:
        return self._count(GroupStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(GroupStatus.SKIPPED)

    @property
    def exit_code(self) -> int:
        if self.cancelled:
            return EXIT_CANCELLED
        if self.failed:
            return EXIT_FAILED
        return EXIT_OK

    def _count(self, status: GroupStatus) -> int:
        return sum(1 for result in self.group_results if result.status == status)
