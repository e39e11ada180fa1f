"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from baas_e2e_tester.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from baas_e2e_tester.configuration.loader import load_configuration


def test_build_placeholder_configuration_contains_all_supported_sections() -> None:
    scaffold = build_placeholder_configuration()

    assert "Test configuration template" in scaffold
    assert "environment:" in scaffold
    assert "harness:" in scaffold
    assert "<OPTIONAL>" in scaffold
    for key in ("BASE_URL", "BASE_API_URL", "EMAIL", "PASSWORD", "PROJECT_REF", "ACCESS_TOKEN"):
        assert key in scaffold


def test_written_scaffold_loads_without_edits(tmp_path: Path) -> None:
    output_path = tmp_path / "config.yaml"

    written_path = write_placeholder_configuration(output_path)
    configuration = load_configuration(written_path)

    assert written_path == output_path.resolve()
    assert configuration.environment["BASE_API_URL"] == "https://api.supabase.com"
    assert configuration.harness.workers == 4


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "config.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(output_path)
