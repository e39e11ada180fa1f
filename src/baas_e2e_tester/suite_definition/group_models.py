"""Test group and workflow step declarations."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from baas_e2e_tester.session_bootstrap import SESSION_KEYS

if TYPE_CHECKING:
    from .step_context import StepContext

StepAction = Callable[["StepContext"], None]


@dataclass(frozen=True)
class WorkflowStep:
    """One action-plus-assertion unit; ``name`` is used for failure attribution."""

    name: str
    action: StepAction
    excluded: bool = False
    exclusion_reason: str | None = None
    timeout_seconds: float | None = None


def step(name: str, action: StepAction, *, timeout_seconds: float | None = None) -> WorkflowStep:
    return WorkflowStep(name=name, action=action, timeout_seconds=timeout_seconds)


def excluded_step(name: str, action: StepAction, *, reason: str) -> WorkflowStep:
    """Declare a step that stays in the group definition but is not executed."""
    return WorkflowStep(name=name, action=action, excluded=True, exclusion_reason=reason)


@dataclass(frozen=True)
class TestGroup:  # pylint: disable=too-many-instance-attributes
    """Named, ordered set of steps validating one workflow end to end.

    ``shared_resources`` names external state the group mutates; two groups that
    share a name never run at the same time. ``exclusive`` groups run alone.
    ``seed`` builds the initial carried state of each new group instance.
    """

    __test__ = False

    name: str
    steps: tuple[WorkflowStep, ...]
    required_keys: frozenset[str] = frozenset()
    tags: tuple[str, ...] = ()
    docs: tuple[str, ...] = ()
    needs_session: bool = False
    shared_resources: frozenset[str] = frozenset()
    exclusive: bool = False
    excluded: bool = False
    exclusion_reason: str | None = None
    finalize: StepAction | None = None
    seed: Callable[[], Mapping[str, Any]] | None = field(default=None, compare=False)
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        names = [workflow_step.name for workflow_step in self.steps]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Group '{self.name}' declares duplicate steps: {duplicates}")

    @property
    def effective_required_keys(self) -> frozenset[str]:
        if self.needs_session:
            return self.required_keys | frozenset(SESSION_KEYS)
        return self.required_keys

    def matches_tags(self, tags: Iterable[str]) -> bool:
        wanted = {tag.lstrip("@").lower() for tag in tags}
        if not wanted:
            return True
        return any(tag.lstrip("@").lower() in wanted for tag in self.tags)
