"""Assertion and polling exports."""

from .bounded_polling import poll_until
from .expectation_failures import (
    AssertionMismatch,
    CleanupFailed,
    GroupSkipped,
    HarnessFailure,
    MissingCarriedState,
    PollTimeout,
    StepTimeout,
    UnexpectedStatus,
)
from .immediate_checks import (
    assert_defined,
    assert_has_key,
    assert_immediate,
    expect_status,
    first_row,
)

__all__ = [
    "AssertionMismatch",
    "CleanupFailed",
    "GroupSkipped",
    "HarnessFailure",
    "MissingCarriedState",
    "PollTimeout",
    "StepTimeout",
    "UnexpectedStatus",
    "assert_defined",
    "assert_has_key",
    "assert_immediate",
    "expect_status",
    "first_row",
    "poll_until",
]
