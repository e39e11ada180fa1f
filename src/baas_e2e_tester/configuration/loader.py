"""Test configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .environment_resolution import DECLARED_KEYS
from .runtime_settings import DEFAULT_ENV_PREFIX, HarnessSettings, TestConfiguration


_PLACEHOLDERS = frozenset({"<REQUIRED>", "<OPTIONAL>"})


class ConfigurationError(Exception):
    """Raised when the test configuration file is invalid."""


def load_configuration(config_path: Path | str | None) -> TestConfiguration:
    """Load and validate the test configuration file.

    A missing ``config_path`` yields the default configuration so the harness can
    run purely from environment variables.
    """
    if config_path is None:
        return TestConfiguration(path=None)
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    environment = _parse_environment_section(parsed.get("environment"))
    harness = _parse_harness_section(parsed.get("harness"), path.parent)
    return TestConfiguration(path=path, environment=environment, harness=harness)


def _parse_environment_section(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    section = _require_mapping(value, "environment")
    environment: dict[str, str] = {}
    for key, raw in section.items():
        name = str(key).strip().upper()
        if name not in DECLARED_KEYS:
            allowed = ", ".join(DECLARED_KEYS)
            raise ConfigurationError(
                f"environment.{key} is not a known setting (expected one of: {allowed})."
            )
        stripped = _optional_string(raw, f"environment.{key}")
        if stripped in _PLACEHOLDERS:
            raise ConfigurationError(
                f"environment.{key} still contains the placeholder {stripped}."
            )
        if stripped:
            environment[name] = stripped
    return environment


def _parse_harness_section(value: Any, base_path: Path) -> HarnessSettings:
    if value is None:
        return HarnessSettings()
    section = _require_mapping(value, "harness")
    defaults = HarnessSettings()
    session_file_raw = _optional_string(section.get("session_file"), "harness.session_file")
    session_file = (
        _resolve_path(base_path, session_file_raw) if session_file_raw else defaults.session_file
    )
    env_prefix = _optional_string(section.get("env_prefix"), "harness.env_prefix")
    return HarnessSettings(
        workers=_require_positive_int(section.get("workers", defaults.workers), "harness.workers"),
        step_timeout_seconds=_require_positive_int(
            section.get("step_timeout_seconds", defaults.step_timeout_seconds),
            "harness.step_timeout_seconds",
        ),
        group_timeout_seconds=_require_positive_int(
            section.get("group_timeout_seconds", defaults.group_timeout_seconds),
            "harness.group_timeout_seconds",
        ),
        login_timeout_seconds=_require_positive_int(
            section.get("login_timeout_seconds", defaults.login_timeout_seconds),
            "harness.login_timeout_seconds",
        ),
        session_file=session_file,
        headless=_require_bool(section.get("headless", defaults.headless), "harness.headless"),
        env_prefix=env_prefix if env_prefix is not None else DEFAULT_ENV_PREFIX,
    )


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
