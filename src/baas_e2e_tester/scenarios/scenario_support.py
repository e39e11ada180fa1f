"""Helpers shared by the scenario definitions."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Sequence

from baas_e2e_tester.configuration import ACCESS_TOKEN, BASE_API_URL, PROJECT_REF
from baas_e2e_tester.expectations import CleanupFailed, assert_has_key, first_row
from baas_e2e_tester.management_api import ManagementApiClient
from baas_e2e_tester.suite_definition import StepAction, StepContext

_LOGGER = logging.getLogger(__name__)

DOCS_URL = "https://supabase.com/docs"
API_DOCS_URL = "https://api.supabase.com/api/v1"

API_KEYS = frozenset({BASE_API_URL, PROJECT_REF, ACCESS_TOKEN})


def unique_suffix() -> str:
    """Millisecond timestamp plus a random tail; unique across concurrent group instances."""
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def table_exists(api: ManagementApiClient, project_ref: str, table_name: str) -> bool:
    response = api.run_query(
        project_ref,
        "SELECT EXISTS (SELECT FROM information_schema.tables "
        f"WHERE table_name = '{table_name}') as table_exists",
        read_only=True,
    )
    row = first_row(response.body, location=f"table_exists({table_name})")
    return bool(assert_has_key(row, "table_exists", location=f"table_exists({table_name})"))


def drop_table(context: StepContext, table_name: str, project_ref: str | None = None) -> None:
    context.api.run_query(
        project_ref or context.project_ref,
        f"DROP TABLE IF EXISTS {table_name}",
        read_only=False,
    )


def run_cleanup(context: StepContext, actions: Sequence[StepAction]) -> None:
    """Attempt every cleanup action, then raise once if any of them failed."""
    failures: list[str] = []
    for action in actions:
        try:
            action(context)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            _LOGGER.warning("[%s] cleanup %s failed: %s", context.group_name, _name(action), exc)
            failures.append(f"{_name(action)}: {exc}")
    if failures:
        raise CleanupFailed(failures)


def _name(action: Callable[..., object]) -> str:
    return getattr(action, "__name__", repr(action)).lstrip("_")
