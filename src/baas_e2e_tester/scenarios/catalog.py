"""The suite's group catalog."""

from __future__ import annotations

from baas_e2e_tester.suite_definition import TestGroup

from .auth_config_groups import build_auth_config_groups
from .branch_groups import build_branch_groups
from .database_groups import build_database_groups
from .ui_groups import build_ui_groups


def build_catalog() -> tuple[TestGroup, ...]:
    """Return every declared group in listing order; names are unique."""
    groups = (
        *build_ui_groups(),
        *build_database_groups(),
        *build_auth_config_groups(),
        *build_branch_groups(),
    )
    names = [group.name for group in groups]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Duplicate group names in catalog: {duplicates}")
    return groups
