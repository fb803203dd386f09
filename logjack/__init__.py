"""
logjack: single-use structured log entries on top of structlog.

Build an Entry by attaching fields, an error and optionally the current call
stack, then write it once at info, warn, error or fatal level.
"""

__version__ = "0.1.0"

from logjack.core.exceptions import RenderError, StackError, with_stack
from logjack.entry import Entry, callstack, new_entry
from logjack.stack import FrameFilter, capture_callstack

__all__ = [
    "Entry",
    "FrameFilter",
    "RenderError",
    "StackError",
    "callstack",
    "capture_callstack",
    "new_entry",
    "with_stack",
]
