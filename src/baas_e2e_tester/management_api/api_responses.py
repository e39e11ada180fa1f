"""Management API response entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ApiResponse:
    """Status and decoded JSON body of one Management API call."""

    endpoint: str
    status_code: int
    body: Any

    def field(self, name: str) -> Any:
        """Return a top-level body property, or None when the body is not an object."""
        if isinstance(self.body, dict):
            return self.body.get(name)
        return None
