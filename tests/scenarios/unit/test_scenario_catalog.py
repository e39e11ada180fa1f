"""Scenario catalog shape tests."""

from __future__ import annotations

from baas_e2e_tester.configuration import ACCESS_TOKEN, EMAIL, PASSWORD, PROJECT_REF
from baas_e2e_tester.scenarios import build_catalog


def _by_name():
    return {group.name: group for group in build_catalog()}


def test_catalog_names_are_unique_and_listed_in_order() -> None:
    names = [group.name for group in build_catalog()]

    assert len(names) == len(set(names))
    assert names == [
        "Table Editor UI",
        "SQL Editor UI",
        "New Project UI",
        "Organizations UI",
        "Database Query API",
        "Database Rollback",
        "Table Lifecycle",
        "Migration Idempotency",
        "Auth Config API",
        "Branch Database Lifecycle",
    ]


def test_ui_groups_need_a_session_and_gate_on_login_keys() -> None:
    for group in build_catalog():
        if "ui" not in group.tags:
            continue
        assert group.needs_session
        assert {EMAIL, PASSWORD} <= group.effective_required_keys


def test_api_groups_gate_on_project_ref_and_access_token() -> None:
    for group in build_catalog():
        if "api" not in group.tags:
            continue
        assert not group.needs_session
        assert {PROJECT_REF, ACCESS_TOKEN} <= group.required_keys


def test_rollback_and_restore_steps_stay_declared_but_excluded() -> None:
    groups = _by_name()

    rollback = groups["Database Rollback"]
    lifecycle = groups["Table Lifecycle"]

    assert [s.excluded for s in rollback.steps] == [True, False, False, False, True, True]
    assert [s.excluded for s in lifecycle.steps] == [False, False, False, True, True]
    assert all(s.exclusion_reason for s in lifecycle.steps if s.excluded)
    assert rollback.finalize is not None
    assert lifecycle.finalize is not None


def test_groups_that_mutate_project_config_declare_shared_resources() -> None:
    groups = _by_name()

    assert groups["Auth Config API"].shared_resources == frozenset({"auth-config"})
    branch = groups["Branch Database Lifecycle"]
    assert branch.shared_resources == frozenset({"database-config"})
    assert branch.excluded
    assert len(branch.steps) == 9


def test_seeded_table_names_differ_between_instances() -> None:
    lifecycle = _by_name()["Table Lifecycle"]

    first = lifecycle.seed()
    second = lifecycle.seed()

    assert first["table_name"].startswith("test_table_")
    assert first["table_name"] != second["table_name"]
    assert first["idempotency_key"] == f"migration_{first['table_name']}"


def test_tag_filter_selects_database_groups() -> None:
    selected = [group.name for group in build_catalog() if group.matches_tags(["@database"])]

    assert "Database Query API" in selected
    assert "Branch Database Lifecycle" in selected
    assert "Table Editor UI" not in selected
