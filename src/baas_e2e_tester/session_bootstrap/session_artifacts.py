"""Session bootstrap entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(frozen=True)
class SessionArtifact:
    """Persisted browser storage state of one authenticated dashboard login."""

    path: Path
    base_url: str
    created_at: datetime


def load_existing_session(session_path: Path, base_url: str) -> SessionArtifact | None:
    """Return the artifact already on disk, or None when there is nothing to reuse."""
    if not session_path.is_file():
        return None
    modified = datetime.fromtimestamp(session_path.stat().st_mtime, tz=UTC)
    return SessionArtifact(path=session_path.resolve(), base_url=base_url, created_at=modified)
