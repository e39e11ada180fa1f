"""Plain-text run summary printed by the CLI."""

from __future__ import annotations

from collections.abc import Sequence

from baas_e2e_tester.workflow_sequencing import GroupResult, GroupStatus, StepStatus

_STATUS_LABELS = {
    GroupStatus.PASSED: "PASS",
    GroupStatus.FAILED: "FAIL",
    GroupStatus.SKIPPED: "SKIP",
    GroupStatus.CANCELLED: "CANCELLED",
}


def render_summary(group_results: Sequence[GroupResult]) -> list[str]:
    """Return one line per group, failure details, and a closing totals line."""
    lines: list[str] = []
    for result in group_results:
        label = _STATUS_LABELS[result.status]
        line = f"{label:<9} {result.name} ({result.duration_seconds:.1f}s)"
        if result.reason:
            line = f"{line}: {result.reason}"
        lines.append(line)
        failed = result.failed_step
        if failed is not None:
            lines.append(f"          step '{failed.name}' [{failed.error_kind}]: {failed.message}")
            if failed.expected is not None or failed.actual is not None:
                lines.append(f"          expected: {failed.expected}")
                lines.append(f"          actual:   {failed.actual}")
        excluded = result.count(StepStatus.EXCLUDED)
        if excluded:
            lines.append(f"          {excluded} excluded step(s)")
        if result.cleanup_error:
            lines.append(f"          cleanup error: {result.cleanup_error}")

    totals = {status: 0 for status in GroupStatus}
    for result in group_results:
        totals[result.status] += 1
    lines.append(
        f"{len(group_results)} group(s): {totals[GroupStatus.PASSED]} passed, "
        f"{totals[GroupStatus.FAILED]} failed, {totals[GroupStatus.SKIPPED]} skipped, "
        f"{totals[GroupStatus.CANCELLED]} cancelled"
    )
    return lines
