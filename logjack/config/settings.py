"""
Logging settings resolved from the environment.

Exposes typed settings (level, format, output stream, fatal exit code)
for use by the structlog configuration and the Entry builder.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

from logjack.config.env import (
    get_fatal_exit_code,
    get_log_format,
    get_log_level,
    get_log_output,
)


@dataclass(frozen=True)
class Settings:
    """Resolved logging settings."""

    log_level: int
    log_format: str
    log_output: str
    fatal_exit_code: int

    @property
    def output_stream(self) -> TextIO:
        return sys.stderr if self.log_output == "stderr" else sys.stdout


def get_settings() -> Settings:
    """
    Return the current logging settings.

    Returns:
        Settings with log_level, log_format, log_output and fatal_exit_code,
        read from LOG_LEVEL, LOG_FORMAT, LOG_OUTPUT and LOGJACK_FATAL_EXIT_CODE.
    """
    return Settings(
        log_level=get_log_level(),
        log_format=get_log_format(),
        log_output=get_log_output(),
        fatal_exit_code=get_fatal_exit_code(),
    )
