"""
Call-stack capture with infrastructure frames filtered out.

Walks the calling stack one frame at a time, shortens each file path to its
last two segments, drops frames that belong to the interpreter's HTTP server,
thread/event-loop machinery or synthetic code objects, and joins the rest as
"file:line" (innermost first).
"""

from __future__ import annotations

import os
import sys
import sysconfig
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

CALLSTACK_KEY = "callstack"
SEPARATOR = ", "

# Resolves the frame `skip` levels above the lookup's caller; None at the end of the stack.
FrameLookup = Callable[[int], Optional[Tuple[str, int]]]

# "python3.12" on POSIX, "Lib" on Windows
_STDLIB_DIR = Path(sysconfig.get_paths()["stdlib"]).name


def caller_frame(skip: int) -> Optional[Tuple[str, int]]:
    """Return (file, line) of the frame `skip` levels above the caller, or None."""
    try:
        frame = sys._getframe(skip + 1)
    except ValueError:
        return None
    return frame.f_code.co_filename, frame.f_lineno


def shorten_path(path: str) -> str:
    """Keep at most the parent directory and the file name."""
    normalized = path.replace(os.sep, "/") if os.sep != "/" else path
    parts = normalized.rsplit("/", 2)
    if len(parts) < 3:
        return normalized
    return parts[1] + "/" + parts[2]


@dataclass(frozen=True)
class FrameFilter:
    """Exclusion rules applied to shortened file names."""

    suffixes: Tuple[str, ...] = (".s", ">")
    http_prefixes: Tuple[str, ...] = (
        "http/server.py",
        f"{_STDLIB_DIR}/socketserver.py",
    )
    runtime_prefixes: Tuple[str, ...] = (
        "asyncio/",
        "futures/thread.py",
        f"{_STDLIB_DIR}/threading.py",
        f"{_STDLIB_DIR}/runpy.py",
    )

    def excludes(self, short_file: str) -> bool:
        return (
            short_file.endswith(self.suffixes)
            or short_file.startswith(self.http_prefixes)
            or short_file.startswith(self.runtime_prefixes)
        )


DEFAULT_FILTER = FrameFilter()


def capture_callstack(
    skip: int,
    lookup: FrameLookup = caller_frame,
    frame_filter: FrameFilter = DEFAULT_FILTER,
) -> str:
    """
    Render the stack starting `skip` frames above this function's caller.

    With skip=0 the first frame reported is capture_callstack itself, so
    callers pass the number of their own frames to hide. Returns an empty
    string when every frame is filtered out.
    """
    frames = []
    i = 0
    while True:
        found = lookup(skip + i)
        i += 1
        if found is None:
            break
        file, line = found
        short = shorten_path(file)
        if frame_filter.excludes(short):
            continue
        frames.append(f"{short}:{line}")
    return SEPARATOR.join(frames)
