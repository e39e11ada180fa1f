"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

GROUPS_SHEET_NAME = "Groups"
STEPS_SHEET_NAME = "Steps"
RUN_INFO_SHEET_NAME = "RunInfo"

GROUP_COLUMNS = (
    "group",
    "status",
    "tags",
    "passed_steps",
    "failed_step",
    "reason",
    "cleanup_error",
    "duration_seconds",
)
STEP_COLUMNS = (
    "group",
    "step",
    "status",
    "error_kind",
    "message",
    "expected",
    "actual",
    "duration_seconds",
)


@dataclass(frozen=True)
class RunMetadata:  # pylint: disable=too-many-instance-attributes
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    run_end: datetime
    output_path: Path
    base_url: str
    base_api_url: str
    workers: int
    session_path: Path | None = None
    cancelled: bool = False
