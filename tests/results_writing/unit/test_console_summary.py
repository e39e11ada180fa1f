"""Console summary rendering tests."""

from __future__ import annotations

from baas_e2e_tester.results_writing import render_summary
from baas_e2e_tester.workflow_sequencing import GroupResult, GroupStatus, StepResult, StepStatus


def test_summary_lists_each_group_and_totals() -> None:
    results = [
        GroupResult(name="Table Editor UI", status=GroupStatus.PASSED, duration_seconds=4.21),
        GroupResult.skipped("Auth Config API", ("read",), "Missing SUPABASE_ACCESS_TOKEN"),
        GroupResult(name="Queued", status=GroupStatus.CANCELLED, reason="run cancelled"),
    ]

    lines = render_summary(results)

    assert lines[0].startswith("PASS")
    assert "Table Editor UI (4.2s)" in lines[0]
    assert lines[1].startswith("SKIP")
    assert lines[1].endswith(": Missing SUPABASE_ACCESS_TOKEN")
    assert lines[2].startswith("CANCELLED")
    assert lines[-1] == "3 group(s): 1 passed, 0 failed, 1 skipped, 1 cancelled"


def test_failed_group_shows_step_details_and_cleanup_error() -> None:
    result = GroupResult(
        name="Database Rollback",
        status=GroupStatus.FAILED,
        steps=(
            StepResult(name="create", status=StepStatus.PASSED),
            StepResult(
                name="insert",
                status=StepStatus.FAILED,
                error_kind="assertion_mismatch",
                message="AssertionMismatch: count",
                expected="1",
                actual="0",
            ),
            StepResult(name="rollback", status=StepStatus.EXCLUDED),
        ),
        cleanup_error="CleanupFailed: drop table",
    )

    lines = render_summary([result])

    assert lines[0].startswith("FAIL")
    assert "step 'insert' [assertion_mismatch]: AssertionMismatch: count" in lines[1]
    assert lines[2].strip() == "expected: 1"
    assert lines[3].strip() == "actual:   0"
    assert lines[4].strip() == "1 excluded step(s)"
    assert lines[5].strip() == "cleanup error: CleanupFailed: drop table"
    assert lines[-1] == "1 group(s): 0 passed, 1 failed, 0 skipped, 0 cancelled"
