"""Step and group outcome entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StepStatus(str, Enum):
    """Outcome of one declared step."""

    PASSED = "passed"
    FAILED = "failed"
    EXCLUDED = "excluded"
    NOT_RUN = "not_run"
    SKIPPED = "skipped"


class GroupStatus(str, Enum):
    """Outcome of one group instance."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class StepResult:  # pylint: disable=too-many-instance-attributes
    """Recorded outcome of one step, with failure details when it failed."""

    name: str
    status: StepStatus
    error_kind: str | None = None
    message: str | None = None
    actual: str | None = None
    expected: str | None = None
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class GroupResult:  # pylint: disable=too-many-instance-attributes
    """Recorded outcome of one group instance."""

    name: str
    status: GroupStatus
    steps: tuple[StepResult, ...] = ()
    tags: tuple[str, ...] = ()
    reason: str | None = None
    cleanup_error: str | None = None
    finalized: bool = False
    duration_seconds: float = 0.0

    @property
    def failed_step(self) -> StepResult | None:
        for step_result in self.steps:
            if step_result.status == StepStatus.FAILED:
                return step_result
        return None

    def count(self, status: StepStatus) -> int:
        return sum(1 for step_result in self.steps if step_result.status == status)

    @staticmethod
    def skipped(
        name: str, step_names: tuple[str, ...], reason: str, tags: tuple[str, ...] = ()
    ) -> GroupResult:
        """Result for a group that never started (excluded or unconfigured)."""
        return GroupResult(
            name=name,
            status=GroupStatus.SKIPPED,
            steps=tuple(
                StepResult(name=step_name, status=StepStatus.SKIPPED, message=reason)
                for step_name in step_names
            ),
            tags=tags,
            reason=reason,
        )
