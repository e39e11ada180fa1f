"""Smoke test of a full CLI run with the dashboard and Management API mocked."""

from __future__ import annotations

import functools
import json
from contextlib import contextmanager
from pathlib import Path

import httpx
from baas_e2e_tester import cli as cli_module
from baas_e2e_tester.cli import cli
from baas_e2e_tester.configuration import DECLARED_KEYS
from baas_e2e_tester.management_api import ManagementApiClient
from baas_e2e_tester.run_execution import execute_suite_run
from click.testing import CliRunner
from openpyxl import load_workbook
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


class _Locator:
    def __init__(self, page: _Page, role: str) -> None:
        self._page = page
        self._role = role

    @property
    def first(self) -> _Locator:
        return self

    def click(self, timeout: float | None = None) -> None:
        del timeout
        self._page.url = "https://dash.test/dashboard/projects"

    def wait_for(self, state: str, timeout: float) -> None:
        del timeout
        if state != "visible" or self._role != "heading":
            raise PlaywrightTimeoutError("not visible")


class _Context:
    def storage_state(self, path: str) -> None:
        Path(path).write_text(json.dumps({"cookies": []}), encoding="utf-8")


class _Page:
    def __init__(self) -> None:
        self.url = "about:blank"
        self.context = _Context()

    def goto(self, url: str) -> None:
        self.url = url

    def fill(self, selector: str, value: str) -> None:
        del selector, value

    def get_by_role(self, role: str, name) -> _Locator:
        del name
        return _Locator(self, role)

    def wait_for_url(self, predicate, timeout: float) -> None:
        del timeout
        if not predicate(self.url):
            raise PlaywrightTimeoutError(self.url)


@contextmanager
def _open_page(*, storage_state, headless):
    del storage_state, headless
    yield _Page()


def _api_client(configuration) -> ManagementApiClient:
    def _handle(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/config/auth"):
            return httpx.Response(500, text="internal error")
        return httpx.Response(201, json=[{"health_check": 1}])

    return ManagementApiClient(
        configuration.base_api_url,
        configuration.access_token,
        transport=httpx.MockTransport(_handle),
    )


def test_cli_run_mixes_passing_failing_and_skipped_groups(monkeypatch, tmp_path: Path) -> None:
    for key in DECLARED_KEYS:
        monkeypatch.delenv(f"SUPABASE_{key}", raising=False)
    monkeypatch.setenv("SUPABASE_BASE_URL", "https://dash.test")
    monkeypatch.setenv("SUPABASE_EMAIL", "qa@example.com")
    monkeypatch.setenv("SUPABASE_PASSWORD", "s3cret")
    monkeypatch.setenv("SUPABASE_PROJECT_REF", "ref1")
    monkeypatch.setenv("SUPABASE_ACCESS_TOKEN", "sbp_token")
    monkeypatch.setattr(
        cli_module,
        "execute_suite_run",
        functools.partial(
            execute_suite_run, page_opener=_open_page, api_client_factory=_api_client
        ),
    )
    output_dir = tmp_path / "results"

    result = CliRunner().invoke(
        cli,
        [
            "run",
            "--group",
            "Organizations UI",
            "--group",
            "Database Query API",
            "--group",
            "Auth Config API",
            "--group",
            "New Project UI",
            "--output-dir",
            str(output_dir),
            "--session-file",
            str(tmp_path / "user.json"),
        ],
    )

    assert result.exit_code == 1
    assert (tmp_path / "user.json").is_file()
    assert "4 group(s): 2 passed, 1 failed, 1 skipped, 0 cancelled" in result.output
    assert "SUPABASE_ORG_REF" in result.output
    report = next(output_dir.glob("e2e-results-*.xlsx"))
    groups = load_workbook(report)["Groups"]
    statuses = {row[0].value: row[1].value for row in groups.iter_rows(min_row=2)}
    assert statuses == {
        "New Project UI": "skipped",
        "Organizations UI": "passed",
        "Database Query API": "passed",
        "Auth Config API": "failed",
    }
