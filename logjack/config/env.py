"""
Environment variable loading and validation for logjack.

- LOG_LEVEL: debug | info | warning | error | critical (default: INFO)
- LOG_FORMAT: text | json | console (default: text)
- LOG_OUTPUT: stdout | stderr (default: stdout)
- LOGJACK_FATAL_EXIT_CODE: exit status used by Entry.fatal (default: 1, never 0)
- Loads .env from project root when available.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# Project root: config is logjack/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "text"
DEFAULT_LOG_OUTPUT = "stdout"
DEFAULT_FATAL_EXIT_CODE = 1

LOG_FORMATS = ("text", "json", "console")
LOG_OUTPUTS = ("stdout", "stderr")


def load_logjack_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def get_log_level() -> int:
    """
    Return LOG_LEVEL from env as a stdlib logging level number.
    Unknown names fall back to INFO.
    """
    load_logjack_env()
    raw = (os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if raw == "WARN":
        raw = "WARNING"
    value = logging.getLevelName(raw)
    if isinstance(value, int):
        return value
    return logging.INFO


def get_log_format() -> str:
    """Return LOG_FORMAT from env: text | json | console. Default: text."""
    load_logjack_env()
    raw = (os.getenv("LOG_FORMAT") or DEFAULT_LOG_FORMAT).strip().lower()
    return raw if raw in LOG_FORMATS else DEFAULT_LOG_FORMAT


def get_log_output() -> str:
    """Return LOG_OUTPUT from env: stdout | stderr. Default: stdout."""
    load_logjack_env()
    raw = (os.getenv("LOG_OUTPUT") or DEFAULT_LOG_OUTPUT).strip().lower()
    return raw if raw in LOG_OUTPUTS else DEFAULT_LOG_OUTPUT


def get_fatal_exit_code() -> int:
    """
    Return LOGJACK_FATAL_EXIT_CODE from env.
    Zero or unparsable values fall back to 1 so a fatal entry never exits cleanly.
    """
    load_logjack_env()
    raw = (os.getenv("LOGJACK_FATAL_EXIT_CODE") or "").strip()
    try:
        code = int(raw)
    except ValueError:
        return DEFAULT_FATAL_EXIT_CODE
    return code if code != 0 else DEFAULT_FATAL_EXIT_CODE
