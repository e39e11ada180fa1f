"""CLI orchestration integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from baas_e2e_tester import cli as cli_module
from baas_e2e_tester.cli import cli
from baas_e2e_tester.configuration import DECLARED_KEYS
from baas_e2e_tester.run_execution import RunOutcome
from baas_e2e_tester.workflow_sequencing import GroupResult, GroupStatus, StepResult, StepStatus
from click.testing import CliRunner
from openpyxl import load_workbook


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch) -> None:
    for key in DECLARED_KEYS:
        monkeypatch.delenv(f"SUPABASE_{key}", raising=False)


def test_generate_config_command_writes_placeholder_file_with_default_name(tmp_path: Path) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=str(tmp_path)):
        result = runner.invoke(cli, ["generate-config"])
        output_path = Path("e2e-config.yaml").resolve()

        assert result.exit_code == 0
        assert output_path.exists()
        content = output_path.read_text(encoding="utf-8")
        assert "environment:" in content
        assert "harness:" in content
        assert str(output_path) in result.output


def test_generate_config_refuses_to_overwrite(tmp_path: Path) -> None:
    existing = tmp_path / "config.yaml"
    existing.write_text("keep: me\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["generate-config", "--output", str(existing)])

    assert result.exit_code != 0
    assert "already exists" in str(result.exception)
    assert existing.read_text(encoding="utf-8") == "keep: me\n"


def test_list_reports_gating_per_group(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_PROJECT_REF", "ref1")

    result = CliRunner().invoke(cli, ["list", "--tag", "api"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    query_line = next(line for line in lines if line.startswith("Database Query API"))
    assert "[api, database]" in query_line
    assert "1 step(s)" in query_line
    assert "skip (Missing SUPABASE_ACCESS_TOKEN environment variables)" in query_line
    branch_line = next(line for line in lines if line.startswith("Branch Database Lifecycle"))
    assert "skip (excluded:" in branch_line
    assert not any(line.startswith("Table Editor UI") for line in lines)


def test_run_without_credentials_skips_groups_and_writes_report(tmp_path: Path) -> None:
    output_dir = tmp_path / "results"

    result = CliRunner().invoke(
        cli,
        ["run", "--group", "Database Query API", "--output-dir", str(output_dir)],
    )

    assert result.exit_code == 0
    assert "SKIP" in result.output
    assert "1 group(s): 0 passed, 0 failed, 1 skipped, 0 cancelled" in result.output
    reports = list(output_dir.glob("e2e-results-*.xlsx"))
    assert len(reports) == 1
    assert str(reports[0]) in result.output
    workbook = load_workbook(reports[0])
    assert workbook["Groups"].cell(row=2, column=2).value == "skipped"


def test_run_with_invalid_config_returns_error(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("environment:\n  NOT_A_KEY: value\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["run", "--config", str(config_path)])

    assert result.exit_code != 0
    assert "environment.NOT_A_KEY is not a known setting" in str(result.exception)


def test_run_passes_options_and_exits_with_failure_code(monkeypatch, tmp_path: Path) -> None:
    captured = {}

    def _fake_run(request):
        captured["request"] = request
        failed = GroupResult(
            name="Auth Config API",
            status=GroupStatus.FAILED,
            steps=(
                StepResult(
                    name="Update site_url configuration",
                    status=StepStatus.FAILED,
                    error_kind="unexpected_status",
                    message="UnexpectedStatus: HTTP 500",
                ),
            ),
        )
        return RunOutcome(group_results=(failed,), report_path=tmp_path / "report.xlsx")

    monkeypatch.setattr(cli_module, "execute_suite_run", _fake_run)

    result = CliRunner().invoke(
        cli,
        [
            "run",
            "--tag",
            "@auth",
            "--workers",
            "2",
            "--session-file",
            "state.json",
            "--reuse-session",
            "--headed",
        ],
    )

    assert result.exit_code == 1
    request = captured["request"]
    assert request.tags == ("@auth",)
    assert request.workers == 2
    assert request.session_file == "state.json"
    assert request.reuse_session is True
    assert request.headless is False
    assert "FAIL" in result.output
    assert "[unexpected_status]" in result.output


def test_cancelled_run_exits_130(monkeypatch) -> None:
    def _fake_run(_request):
        cancelled = GroupResult(name="Queued", status=GroupStatus.CANCELLED, reason="run cancelled")
        return RunOutcome(group_results=(cancelled,), report_path=None, cancelled=True)

    monkeypatch.setattr(cli_module, "execute_suite_run", _fake_run)

    result = CliRunner().invoke(cli, ["run"])

    assert result.exit_code == 130
    assert "CANCELLED" in result.output


def test_authenticate_reports_missing_login_settings(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli, ["authenticate", "--session-file", str(tmp_path / "user.json")]
    )

    assert result.exit_code != 0
    assert "SUPABASE_EMAIL" in str(result.exception)
    assert "SUPABASE_PASSWORD" in str(result.exception)
    assert not (tmp_path / "user.json").exists()
