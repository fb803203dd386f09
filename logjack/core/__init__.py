"""
Core utilities shared by the Entry builder and the logging configuration.
"""

from logjack.core.exceptions import (  # noqa: F401
    LogjackError,
    RenderError,
    StackError,
    with_stack,
)

__all__ = ["LogjackError", "RenderError", "StackError", "with_stack"]
