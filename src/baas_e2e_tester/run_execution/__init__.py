"""Run execution exports."""

from .resource_gate import ResourceGate
from .run_contracts import (
    EXIT_CANCELLED,
    EXIT_FAILED,
    EXIT_OK,
    RunnableGroup,
    RunOutcome,
    RunPlan,
    RunRequest,
)
from .suite_run_use_case import (
    DEFAULT_OUTPUT_DIR,
    RunExecutionError,
    execute_listing,
    execute_session_bootstrap,
    execute_suite_run,
    plan_run,
    select_groups,
)

__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "EXIT_CANCELLED",
    "EXIT_FAILED",
    "EXIT_OK",
    "ResourceGate",
    "RunExecutionError",
    "RunOutcome",
    "RunPlan",
    "RunRequest",
    "RunnableGroup",
    "execute_listing",
    "execute_session_bootstrap",
    "execute_suite_run",
    "plan_run",
    "select_groups",
]
