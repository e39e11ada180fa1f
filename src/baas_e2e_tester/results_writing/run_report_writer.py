"""Results workbook writer service."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from baas_e2e_tester.workflow_sequencing import GroupResult, GroupStatus, StepStatus

from .report_models import (
    GROUP_COLUMNS,
    GROUPS_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    STEP_COLUMNS,
    STEPS_SHEET_NAME,
    RunMetadata,
)

_MAX_CELL_TEXT = 32_000


def write_results_workbook(
    output_path: Path | str,
    group_results: Sequence[GroupResult],
    run_metadata: RunMetadata,
) -> Path:
    """Write the Groups, Steps and RunInfo sheets and return the saved path."""
    workbook = Workbook()
    groups_sheet = workbook.active
    groups_sheet.title = GROUPS_SHEET_NAME
    _write_header(groups_sheet, GROUP_COLUMNS)
    for result in group_results:
        groups_sheet.append(_group_row(result))

    steps_sheet = workbook.create_sheet(STEPS_SHEET_NAME)
    _write_header(steps_sheet, STEP_COLUMNS)
    for result in group_results:
        for step_result in result.steps:
            steps_sheet.append(
                [
                    result.name,
                    step_result.name,
                    step_result.status.value,
                    step_result.error_kind,
                    _clip(step_result.message),
                    _clip(step_result.expected),
                    _clip(step_result.actual),
                    round(step_result.duration_seconds, 3),
                ]
            )

    _write_run_info_sheet(workbook, run_metadata, group_results)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output


def _group_row(result: GroupResult) -> list[Any]:
    failed = result.failed_step
    return [
        result.name,
        result.status.value,
        ", ".join(result.tags),
        result.count(StepStatus.PASSED),
        failed.name if failed is not None else None,
        _clip(result.reason or (failed.message if failed is not None else None)),
        _clip(result.cleanup_error),
        round(result.duration_seconds, 3),
    ]


def _write_header(sheet, columns: Sequence[str]) -> None:
    sheet.append(list(columns))
    for index, column in enumerate(columns, start=1):
        sheet.cell(row=1, column=index).font = Font(bold=True)
        sheet.column_dimensions[get_column_letter(index)].width = max(12, len(column) + 4)
    sheet.freeze_panes = "A2"


def _write_run_info_sheet(
    workbook, run_metadata: RunMetadata, group_results: Sequence[GroupResult]
) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)

    def _count(status: GroupStatus) -> int:
        return sum(1 for result in group_results if result.status == status)

    entries = (
        ("run_start", run_metadata.run_start.isoformat()),
        ("run_end", run_metadata.run_end.isoformat()),
        ("output_path", str(run_metadata.output_path)),
        ("base_url", run_metadata.base_url),
        ("base_api_url", run_metadata.base_api_url),
        ("workers", run_metadata.workers),
        ("session_path", str(run_metadata.session_path) if run_metadata.session_path else None),
        ("cancelled", run_metadata.cancelled),
        ("groups", len(group_results)),
        ("passed", _count(GroupStatus.PASSED)),
        ("failed", _count(GroupStatus.FAILED)),
        ("skipped", _count(GroupStatus.SKIPPED)),
        ("cancelled_groups", _count(GroupStatus.CANCELLED)),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)


def _clip(value: str | None) -> str | None:
    if value is None or len(value) <= _MAX_CELL_TEXT:
        return value
    return value[:_MAX_CELL_TEXT] + "..."
