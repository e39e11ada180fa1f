"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_ENV_PREFIX = "SUPABASE_"
DEFAULT_SESSION_FILE = ".auth/user.json"


@dataclass(frozen=True)
class HarnessSettings:  # pylint: disable=too-many-instance-attributes
    """Process-wide harness tuning."""

    workers: int = 4
    step_timeout_seconds: int = 300
    group_timeout_seconds: int = 900
    login_timeout_seconds: int = 30
    session_file: Path = Path(DEFAULT_SESSION_FILE)
    headless: bool = True
    env_prefix: str = DEFAULT_ENV_PREFIX


@dataclass(frozen=True)
class TestConfiguration:
    """Top-level test configuration aggregate."""

    __test__ = False

    path: Path | None
    environment: Mapping[str, str] = field(default_factory=dict)
    harness: HarnessSettings = field(default_factory=HarnessSettings)
