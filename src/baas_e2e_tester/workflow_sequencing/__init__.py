"""Workflow sequencing exports."""

from .step_outcomes import GroupResult, GroupStatus, StepResult, StepStatus
from .step_sequencer import run_group

__all__ = ["GroupResult", "GroupStatus", "StepResult", "StepStatus", "run_group"]
