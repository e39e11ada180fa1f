"""Environment resolution: turn process settings into per-group configuration."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .runtime_settings import DEFAULT_ENV_PREFIX

BASE_URL = "BASE_URL"
BASE_API_URL = "BASE_API_URL"
EMAIL = "EMAIL"
PASSWORD = "PASSWORD"
ORG_REF = "ORG_REF"
PROJECT_REF = "PROJECT_REF"
ACCESS_TOKEN = "ACCESS_TOKEN"

DECLARED_KEYS: tuple[str, ...] = (
    BASE_URL,
    BASE_API_URL,
    EMAIL,
    PASSWORD,
    ORG_REF,
    PROJECT_REF,
    ACCESS_TOKEN,
)

DEFAULT_VALUES: Mapping[str, str] = MappingProxyType(
    {
        BASE_URL: "https://supabase.com",
        BASE_API_URL: "https://api.supabase.com",
    }
)


@dataclass(frozen=True)
class Configuration:
    """Immutable environment configuration for one test group.

    Every key the group declared as required is guaranteed to be non-empty; other
    keys may be empty strings.
    """

    values: Mapping[str, str]

    def get(self, key: str) -> str:
        return self.values.get(key, "")

    @property
    def base_url(self) -> str:
        return self.get(BASE_URL).rstrip("/")

    @property
    def base_api_url(self) -> str:
        return self.get(BASE_API_URL).rstrip("/")

    @property
    def email(self) -> str:
        return self.get(EMAIL)

    @property
    def password(self) -> str:
        return self.get(PASSWORD)

    @property
    def org_ref(self) -> str:
        return self.get(ORG_REF)

    @property
    def project_ref(self) -> str:
        return self.get(PROJECT_REF)

    @property
    def access_token(self) -> str:
        return self.get(ACCESS_TOKEN)


@dataclass(frozen=True)
class Unconfigured:
    """Resolution result when required settings are missing."""

    missing_keys: tuple[str, ...]
    env_prefix: str = DEFAULT_ENV_PREFIX

    @property
    def reason(self) -> str:
        names = ", ".join(f"{self.env_prefix}{key}" for key in self.missing_keys)
        return f"Missing {names} environment variables"


class EnvironmentResolver:
    """Loads declared settings once and answers per-group gating questions."""

    def __init__(self, values: Mapping[str, str], *, env_prefix: str = DEFAULT_ENV_PREFIX) -> None:
        self._values = MappingProxyType(
            {key: (values.get(key) or "").strip() for key in DECLARED_KEYS}
        )
        self._env_prefix = env_prefix

    @classmethod
    def from_sources(
        cls,
        *,
        environ: Mapping[str, str] | None = None,
        file_values: Mapping[str, str] | None = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
    ) -> EnvironmentResolver:
        """Merge defaults, configuration-file values and environment variables (last wins)."""
        source = os.environ if environ is None else environ
        merged: dict[str, str] = dict(DEFAULT_VALUES)
        for key, value in (file_values or {}).items():
            if value and value.strip():
                merged[key] = value
        for key in DECLARED_KEYS:
            value = source.get(f"{env_prefix}{key}")
            if value and value.strip():
                merged[key] = value
        return cls(merged, env_prefix=env_prefix)

    @property
    def env_prefix(self) -> str:
        return self._env_prefix

    def resolve(self, required_keys: Iterable[str]) -> Configuration | Unconfigured:
        """Return a populated configuration, or the keys that stop a group from running."""
        required = set(required_keys)
        unknown = required.difference(DECLARED_KEYS)
        if unknown:
            raise ValueError(f"Unknown configuration keys requested: {', '.join(sorted(unknown))}")
        missing = tuple(key for key in DECLARED_KEYS if key in required and not self._values[key])
        if missing:
            return Unconfigured(missing_keys=missing, env_prefix=self._env_prefix)
        return Configuration(values=self._values)
