"""Database groups driven through the Management API query and migration endpoints."""

from __future__ import annotations

from datetime import UTC, datetime

from baas_e2e_tester.expectations import (
    assert_defined,
    assert_has_key,
    assert_immediate,
    first_row,
    poll_until,
)
from baas_e2e_tester.suite_definition import StepContext, TestGroup, excluded_step, step

from .scenario_support import API_KEYS, DOCS_URL, drop_table, table_exists, unique_suffix

HEALTH_CHECK_QUERY = "SELECT 1 as health_check"
RESTORE_POLL_INTERVAL_SECONDS = 10.0
RESTORE_POLL_ATTEMPTS = 30

ROLLBACK_NOT_AVAILABLE = "restore points are not yet available on the platform"
PITR_NOT_AVAILABLE = "point-in-time recovery is not yet available on the platform"


def _seed_table() -> dict[str, str]:
    suffix = unique_suffix()
    return {
        "table_name": f"test_table_{suffix}",
        "idempotency_key": f"migration_test_table_{suffix}",
    }


def _table(context: StepContext) -> str:
    return context.state.require("table_name")


def _drop_group_table(context: StepContext) -> None:
    drop_table(context, _table(context))


def _health_check(context: StepContext) -> None:
    response = context.api.run_query(context.project_ref, HEALTH_CHECK_QUERY, read_only=True)
    assert_defined(response.body, location="health check response body")


def build_database_query_group() -> TestGroup:
    return TestGroup(
        name="Database Query API",
        steps=(step("Database health check via API", _health_check),),
        required_keys=API_KEYS,
        tags=("api", "database"),
        docs=(DOCS_URL,),
    )


# Database Rollback


def _seed_rollback() -> dict[str, str]:
    seeded = _seed_table()
    seeded["requested_checkpoint"] = f"checkpoint_before_migration_{seeded['table_name']}"
    return seeded


def _create_checkpoint(context: StepContext) -> None:
    requested = context.state.require("requested_checkpoint")
    response = context.api.create_backup(context.project_ref, requested)
    context.state.set("checkpoint_name", response.field("name") or requested)


def _migrate_with_email(context: StepContext) -> None:
    table_name = _table(context)
    context.api.apply_migration(
        context.project_ref,
        f"CREATE TABLE {table_name} ("
        " id SERIAL PRIMARY KEY,"
        " name TEXT NOT NULL,"
        " email TEXT UNIQUE,"
        " created_at TIMESTAMP DEFAULT NOW());"
        f" ALTER TABLE {table_name} ENABLE ROW LEVEL SECURITY;",
        name=f"create_{table_name}_with_rls",
        idempotency_key=context.state.require("idempotency_key"),
    )


def _insert_four_rows(context: StepContext) -> None:
    context.api.run_query(
        context.project_ref,
        f"INSERT INTO {_table(context)} (name, email) VALUES"
        " ('Alice Johnson', 'alice@example.com'),"
        " ('Bob Smith', 'bob@example.com'),"
        " ('Carol Davis', 'carol@example.com'),"
        " ('David Wilson', 'david@example.com')",
        read_only=False,
    )


def _verify_record_count(context: StepContext) -> None:
    response = context.api.run_query(
        context.project_ref,
        "SELECT COUNT(*) as record_count, MIN(created_at) as first_record,"
        f" MAX(created_at) as last_record FROM {_table(context)}",
        read_only=True,
    )
    assert_defined(response.body, location="record count response body")


def _rollback_to_checkpoint(context: StepContext) -> None:
    context.api.restore_backup(context.project_ref, context.state.require("checkpoint_name"))


def _verify_table_removed(context: StepContext) -> None:
    table_name = _table(context)
    poll_until(
        lambda: table_exists(context.api, context.project_ref, table_name),
        lambda exists: not exists,
        interval_seconds=RESTORE_POLL_INTERVAL_SECONDS,
        max_attempts=RESTORE_POLL_ATTEMPTS,
        description=f"table {table_name} removed",
        stop_event=context.stop_event,
    )


def build_database_rollback_group() -> TestGroup:
    return TestGroup(
        name="Database Rollback",
        steps=(
            excluded_step(
                "Create backup checkpoint before migration",
                _create_checkpoint,
                reason=ROLLBACK_NOT_AVAILABLE,
            ),
            step("Execute database migration", _migrate_with_email),
            step("Insert sample data into new table", _insert_four_rows),
            step("Verify table exists and contains data", _verify_record_count),
            excluded_step(
                "Rollback to backup checkpoint",
                _rollback_to_checkpoint,
                reason=ROLLBACK_NOT_AVAILABLE,
            ),
            excluded_step(
                "Verify rollback removed the table",
                _verify_table_removed,
                reason=ROLLBACK_NOT_AVAILABLE,
            ),
        ),
        required_keys=API_KEYS,
        tags=("api", "database", "backup", "recovery", "rollback"),
        docs=(DOCS_URL,),
        finalize=_drop_group_table,
        seed=_seed_rollback,
    )


# Table Lifecycle


def _migrate_lifecycle_table(context: StepContext) -> None:
    table_name = _table(context)
    context.state.set("snapshot_time", datetime.now(UTC).isoformat())
    context.api.apply_migration(
        context.project_ref,
        f"CREATE TABLE {table_name} ("
        " id SERIAL PRIMARY KEY,"
        " name TEXT NOT NULL,"
        " created_at TIMESTAMP DEFAULT NOW());"
        f" ALTER TABLE {table_name} ENABLE ROW LEVEL SECURITY;",
        name=f"create_{table_name}",
        idempotency_key=context.state.require("idempotency_key"),
    )


def _insert_three_rows(context: StepContext) -> None:
    context.api.run_query(
        context.project_ref,
        f"INSERT INTO {_table(context)} (name)"
        " VALUES ('Test User 1'), ('Test User 2'), ('Test User 3')",
        read_only=False,
    )


def _verify_rows(context: StepContext) -> None:
    response = context.api.run_query(
        context.project_ref,
        "SELECT id, name, created_at, COUNT(*) OVER() as total_records"
        f" FROM {_table(context)} ORDER BY id",
        read_only=True,
    )
    assert_defined(response.body, location="table rows response body")


def _restore_snapshot(context: StepContext) -> None:
    context.api.restore_point_in_time(context.project_ref, context.state.require("snapshot_time"))


def build_table_lifecycle_group() -> TestGroup:
    return TestGroup(
        name="Table Lifecycle",
        steps=(
            step("Create table schema via migration", _migrate_lifecycle_table),
            step("Insert sample data", _insert_three_rows),
            step("Verify data integrity", _verify_rows),
            excluded_step(
                "Point-in-time recovery", _restore_snapshot, reason=PITR_NOT_AVAILABLE
            ),
            excluded_step(
                "Verify recovery removed the table",
                _verify_table_removed,
                reason=PITR_NOT_AVAILABLE,
            ),
        ),
        required_keys=API_KEYS,
        tags=("api", "database", "lifecycle"),
        docs=(DOCS_URL,),
        finalize=_drop_group_table,
        seed=_seed_table,
    )


# Migration Idempotency


def _count_group_tables(context: StepContext) -> int:
    response = context.api.run_query(
        context.project_ref,
        "SELECT COUNT(*) as table_count FROM information_schema.tables"
        f" WHERE table_name = '{_table(context)}'",
        read_only=True,
    )
    row = first_row(response.body, location="table count")
    return int(assert_has_key(row, "table_count", location="table count"))


def _apply_idempotent_migration(context: StepContext) -> None:
    table_name = _table(context)
    context.api.apply_migration(
        context.project_ref,
        f"CREATE TABLE {table_name} (id SERIAL PRIMARY KEY, name TEXT NOT NULL);",
        name=f"create_{table_name}",
        idempotency_key=context.state.require("idempotency_key"),
    )


def _record_initial_count(context: StepContext) -> None:
    context.state.set("initial_table_count", _count_group_tables(context))


def _verify_count_increased(context: StepContext) -> None:
    expected = context.state.require("initial_table_count") + 1
    assert_immediate(_count_group_tables(context), expected, location="table count after migration")


def _verify_count_unchanged(context: StepContext) -> None:
    expected = context.state.require("initial_table_count") + 1
    assert_immediate(_count_group_tables(context), expected, location="table count after replay")


def build_migration_idempotency_group() -> TestGroup:
    return TestGroup(
        name="Migration Idempotency",
        steps=(
            step("Count tables before migration", _record_initial_count),
            step("Apply migration with idempotency key", _apply_idempotent_migration),
            step("Verify migration created one table", _verify_count_increased),
            step("Re-apply migration with the same key", _apply_idempotent_migration),
            step("Verify replay created nothing", _verify_count_unchanged),
        ),
        required_keys=API_KEYS,
        tags=("api", "database", "migrations"),
        docs=(DOCS_URL,),
        finalize=_drop_group_table,
        seed=_seed_table,
    )


def build_database_groups() -> tuple[TestGroup, ...]:
    return (
        build_database_query_group(),
        build_database_rollback_group(),
        build_table_lifecycle_group(),
        build_migration_idempotency_group(),
    )
