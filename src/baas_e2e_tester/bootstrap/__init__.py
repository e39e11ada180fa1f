"""Project bootstrap domain exports."""

from .project_bootstrap import (
    BootstrapError,
    VirtualEnvironment,
    bootstrap_commands,
    bootstrap_project_environment,
)

__all__ = [
    "BootstrapError",
    "VirtualEnvironment",
    "bootstrap_commands",
    "bootstrap_project_environment",
]
