"""Results writing domain exports."""

from .console_summary import render_summary
from .report_models import (
    GROUP_COLUMNS,
    GROUPS_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    STEP_COLUMNS,
    STEPS_SHEET_NAME,
    RunMetadata,
)
from .run_report_writer import write_results_workbook

__all__ = [
    "GROUP_COLUMNS",
    "GROUPS_SHEET_NAME",
    "RUN_INFO_SHEET_NAME",
    "STEP_COLUMNS",
    "STEPS_SHEET_NAME",
    "RunMetadata",
    "render_summary",
    "write_results_workbook",
]
