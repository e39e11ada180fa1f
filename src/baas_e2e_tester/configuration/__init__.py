"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .environment_resolution import (
    ACCESS_TOKEN,
    BASE_API_URL,
    BASE_URL,
    DECLARED_KEYS,
    EMAIL,
    ORG_REF,
    PASSWORD,
    PROJECT_REF,
    Configuration,
    EnvironmentResolver,
    Unconfigured,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import HarnessSettings, TestConfiguration

__all__ = [
    "ACCESS_TOKEN",
    "BASE_API_URL",
    "BASE_URL",
    "DECLARED_KEYS",
    "EMAIL",
    "ORG_REF",
    "PASSWORD",
    "PROJECT_REF",
    "Configuration",
    "EnvironmentResolver",
    "Unconfigured",
    "HarnessSettings",
    "TestConfiguration",
    "ConfigurationError",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
