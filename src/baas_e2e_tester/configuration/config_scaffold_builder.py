"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "e2e-config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Test configuration template for baas-e2e-tester.
# Every value is optional: environment variables (SUPABASE_<KEY>) override this file.
# Uncomment the <OPTIONAL> lines you need and replace the placeholders.
# Keep secrets (PASSWORD, ACCESS_TOKEN) in environment variables where possible.

environment:
  # Dashboard and Management API base URLs.
  BASE_URL: "https://supabase.com"
  BASE_API_URL: "https://api.supabase.com"
  # Dashboard login used by the session bootstrap (UI groups).
  # EMAIL: "<OPTIONAL>"
  # PASSWORD: "<OPTIONAL>"
  # ORG_REF: "<OPTIONAL>"
  # PROJECT_REF: "<OPTIONAL>"
  # ACCESS_TOKEN: "<OPTIONAL>"

harness:
  # Groups run in parallel up to this many workers; steps in a group never do.
  workers: 4
  step_timeout_seconds: 300
  group_timeout_seconds: 900
  login_timeout_seconds: 30
  # Session artifact written by the login bootstrap and read by UI groups.
  session_file: ".auth/user.json"
  headless: true
  env_prefix: "SUPABASE_"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML test configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder test configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Test configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
