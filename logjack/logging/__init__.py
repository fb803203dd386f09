"""
Structured logging for logjack.

structlog configuration, renderers and the process-wide default logger that
Entry instances delegate to when no logger is injected.
"""

from logjack.logging.logger import (
    TextRenderer,
    build_processors,
    configure_structlog,
    default_logger,
    format_error_fields,
    get_logger,
    prefix_clashing_fields,
)

__all__ = [
    "TextRenderer",
    "build_processors",
    "configure_structlog",
    "default_logger",
    "format_error_fields",
    "get_logger",
    "prefix_clashing_fields",
]
