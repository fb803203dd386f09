"""
Configuration management for logjack.

Loads logging settings from environment variables and an optional .env
file. Exposes a single source of truth for level, format and output.
"""

from logjack.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
