"""
Library-level exceptions.

Responsibilities:
- RenderError: raised by Entry.render() when the processor chain fails.
- StackError / with_stack(): wrap an exception together with the call site
  that wrapped it, so the error formatter can report file:function:line.
"""

from __future__ import annotations

import sys
from typing import Optional, Tuple


class LogjackError(Exception):
    """Base class for logjack errors."""


class RenderError(LogjackError):
    """The formatter failed to render an entry's fields."""

    def __init__(self, message: str, partial: str = ""):
        super().__init__(message)
        self.partial = partial


class StackError(Exception):
    """
    An exception annotated with the call site where it was wrapped.

    str() is the cause's message; `site` is (file, function, line).
    """

    def __init__(self, cause: BaseException, site: Tuple[str, str, int]):
        super().__init__(str(cause))
        self.cause = cause
        self.site = site
        self.__cause__ = cause

    def __str__(self) -> str:
        message = str(self.cause)
        return message or type(self.cause).__name__


def with_stack(err: Optional[BaseException]) -> Optional[StackError]:
    """
    Annotate err with the caller's file, function and line.

    Returns None when err is None.
    """
    if err is None:
        return None
    frame = sys._getframe(1)
    code = frame.f_code
    return StackError(err, (code.co_filename, code.co_name, frame.f_lineno))
