"""Scenario catalog exports."""

from .catalog import build_catalog

__all__ = ["build_catalog"]
