"""Suite definition exports."""

from .carried_state import CarriedState
from .group_models import StepAction, TestGroup, WorkflowStep, excluded_step, step
from .step_context import GroupResources, StepContext, default_api_client_factory

__all__ = [
    "CarriedState",
    "GroupResources",
    "StepAction",
    "StepContext",
    "TestGroup",
    "WorkflowStep",
    "default_api_client_factory",
    "excluded_step",
    "step",
]
