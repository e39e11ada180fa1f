"""Scratch data carried from earlier steps to later ones inside one group instance."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from baas_e2e_tester.expectations import MissingCarriedState


class CarriedState:
    """Mutable key-value state owned by exactly one group instance."""

    def __init__(self, seed: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(seed or {})

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def require(self, key: str) -> Any:
        """Return a value written earlier, failing loudly if no step ever set it."""
        if key not in self._values:
            raise MissingCarriedState(key, available=sorted(self._values))
        return self._values[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)
