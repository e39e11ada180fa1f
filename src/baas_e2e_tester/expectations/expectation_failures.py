"""Failure taxonomy shared by steps, the sequencer, and the reports."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class HarnessFailure(Exception):
    """Base class for failures a step can report with an error kind."""

    kind = "error"
    actual: Any = None
    expected: Any = None


class AssertionMismatch(HarnessFailure):
    """An expected value or UI state did not match the observed one."""

    kind = "assertion_mismatch"

    def __init__(self, *, actual: Any, expected: Any, location: str) -> None:
        self.actual = actual
        self.expected = expected
        self.location = location
        super().__init__(f"{location}: expected {expected!r}, got {actual!r}")


class UnexpectedStatus(HarnessFailure):
    """An external call returned a status outside its documented contract."""

    kind = "unexpected_status"

    def __init__(
        self,
        *,
        endpoint: str,
        expected: Sequence[int],
        actual: int,
        body: str = "",
    ) -> None:
        self.endpoint = endpoint
        self.expected = tuple(expected)
        self.actual = actual
        self.body = body
        expected_text = " or ".join(str(status) for status in self.expected)
        message = f"{endpoint} returned HTTP {actual}, expected {expected_text}"
        if body:
            message = f"{message}: {body[:500]}"
        super().__init__(message)


class PollTimeout(HarnessFailure):
    """A bounded poll exhausted its attempts without the condition becoming true."""

    kind = "timeout"

    def __init__(self, *, description: str, attempts: int, last_value: Any = None) -> None:
        self.description = description
        self.attempts = attempts
        self.last_value = last_value
        self.actual = last_value
        self.expected = description
        super().__init__(f"{description} not reached after {attempts} attempts")


class StepTimeout(HarnessFailure):
    """A step did not finish inside its time budget."""

    kind = "timeout"

    def __init__(self, *, step_name: str, timeout_seconds: float) -> None:
        self.step_name = step_name
        self.timeout_seconds = timeout_seconds
        super().__init__(f"step '{step_name}' exceeded {timeout_seconds:g}s")


class MissingCarriedState(HarnessFailure):
    """A step read carried state that no earlier step wrote."""

    kind = "missing_state"

    def __init__(self, key: str, *, available: Sequence[str] = ()) -> None:
        self.key = key
        self.expected = key
        self.actual = tuple(available)
        known = ", ".join(available) or "none"
        super().__init__(f"carried state '{key}' was never set by an earlier step (set: {known})")


class GroupSkipped(Exception):
    """Raised by a step when the target platform cannot run the rest of the group."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class CleanupFailed(HarnessFailure):
    """One or more finalization actions raised; every action was still attempted."""

    kind = "cleanup_failed"

    def __init__(self, failures: Sequence[str]) -> None:
        self.failures = tuple(failures)
        super().__init__("; ".join(self.failures))
