"""Local environment bootstrap: virtual environment, dependencies and browser binaries."""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[[tuple[str, ...], Path], None]

PLAYWRIGHT_BROWSER = "chromium"


class BootstrapError(Exception):
    """Raised when project bootstrap commands fail."""


@dataclass(frozen=True)
class VirtualEnvironment:
    """Location of the repository-local ``.venv`` and its executables."""

    repo_root: Path

    @property
    def directory(self) -> Path:
        return self.repo_root / ".venv"

    @property
    def python(self) -> Path:
        return self._executable("python")

    @property
    def uv(self) -> Path:
        return self._executable("uv")

    def _executable(self, name: str) -> Path:
        if sys.platform.startswith("win"):
            return self.directory / "Scripts" / f"{name}.exe"
        return self.directory / "bin" / name


def bootstrap_project_environment(
    *,
    repo_root: Path,
    install_browsers: bool = True,
    run_command: CommandRunner | None = None,
) -> VirtualEnvironment:
    """Create ``.venv`` when missing, sync every dependency group, install the browser."""
    command_runner = run_command or _run_checked_command
    venv = VirtualEnvironment(repo_root=repo_root.resolve())
    if not venv.python.exists():
        command_runner((sys.executable, "-m", "venv", ".venv"), venv.repo_root)
    for command in bootstrap_commands(venv, install_browsers=install_browsers):
        command_runner(command, venv.repo_root)
    return venv


def bootstrap_commands(
    venv: VirtualEnvironment, *, install_browsers: bool = True
) -> tuple[tuple[str, ...], ...]:
    commands: list[tuple[str, ...]] = [
        (str(venv.python), "-m", "pip", "install", "--upgrade", "pip", "uv"),
        (str(venv.uv), "sync", "--all-groups"),
    ]
    if install_browsers:
        commands.append((str(venv.python), "-m", "playwright", "install", PLAYWRIGHT_BROWSER))
    return tuple(commands)


def _run_checked_command(command: tuple[str, ...], cwd: Path) -> None:
    command_text = shlex.join(command)
    _LOGGER.info("running %s", command_text)
    try:
        subprocess.run(list(command), cwd=cwd, check=True)
    except FileNotFoundError as exc:
        raise BootstrapError(f"Bootstrap command not found: {command_text}") from exc
    except subprocess.CalledProcessError as exc:
        raise BootstrapError(
            f"Bootstrap command failed with exit code {exc.returncode}: {command_text}"
        ) from exc
