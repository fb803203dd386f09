"""
Tests for call-stack capture (logjack.stack): path shortening, frame
exclusion rules and the skip/termination behavior of the walk.

A fake frame lookup stands in for sys._getframe so the filter can be checked
against synthetic stacks.
"""

from __future__ import annotations

import threading

import pytest

from logjack.stack import (
    FrameFilter,
    caller_frame,
    capture_callstack,
    shorten_path,
)


def _fake_lookup(frames):
    """Return a lookup over (file, line) pairs; None past the end."""

    def lookup(skip):
        if skip < len(frames):
            return frames[skip]
        return None

    return lookup


@pytest.mark.parametrize(
    "path, short",
    [
        ("/home/dev/project/app/handlers.py", "app/handlers.py"),
        ("app/handlers.py", "app/handlers.py"),
        ("handlers.py", "handlers.py"),
        ("/handlers.py", "/handlers.py"),
        ("<frozen runpy>", "<frozen runpy>"),
    ],
)
def test_shorten_path(path, short):
    """Only the parent directory and file name survive."""
    assert shorten_path(path) == short


def test_capture_joins_innermost_first():
    """Frames are formatted file:line and joined with ", " in walk order."""
    lookup = _fake_lookup([
        ("/srv/app/api/handlers.py", 42),
        ("/srv/app/api/routes.py", 7),
        ("/srv/app/main.py", 3),
    ])
    assert capture_callstack(0, lookup) == "api/handlers.py:42, api/routes.py:7, app/main.py:3"


def test_capture_honors_skip():
    """Frames below the skip depth are not reported."""
    lookup = _fake_lookup([
        ("/srv/app/logjack/stack.py", 1),
        ("/srv/app/logjack/entry.py", 2),
        ("/srv/app/api/handlers.py", 42),
    ])
    assert capture_callstack(2, lookup) == "api/handlers.py:42"


def test_assembly_frames_are_excluded():
    """A frame whose short name ends in .s never appears."""
    lookup = _fake_lookup([
        ("/srv/app/api/handlers.py", 42),
        ("/usr/local/go/src/runtime/asm_amd64.s", 1581),
    ])
    result = capture_callstack(0, lookup)
    assert "asm_amd64.s" not in result
    assert result == "api/handlers.py:42"


def test_http_server_frames_are_excluded():
    """http.server frames are infrastructure noise."""
    lookup = _fake_lookup([
        ("/srv/app/api/handlers.py", 42),
        ("/usr/lib/python3.12/http/server.py", 432),
    ])
    assert capture_callstack(0, lookup) == "api/handlers.py:42"


def test_runtime_frames_are_excluded():
    """asyncio, executor and synthetic frames are dropped."""
    lookup = _fake_lookup([
        ("/srv/app/api/handlers.py", 42),
        ("/usr/lib/python3.12/asyncio/base_events.py", 1999),
        ("/usr/lib/python3.12/concurrent/futures/thread.py", 58),
        ("<frozen runpy>", 88),
        ("<string>", 1),
    ])
    assert capture_callstack(0, lookup) == "api/handlers.py:42"


def test_all_frames_filtered_gives_empty_string():
    """Nothing surviving the filter yields "" rather than None."""
    lookup = _fake_lookup([
        ("/usr/lib/python3.12/http/server.py", 432),
        ("/usr/local/go/src/runtime/asm_amd64.s", 1581),
    ])
    assert capture_callstack(0, lookup) == ""


def test_empty_stack_gives_empty_string():
    """A lookup that ends immediately yields ""."""
    assert capture_callstack(0, lambda skip: None) == ""


def test_custom_filter():
    """FrameFilter rules are configurable."""
    frame_filter = FrameFilter(suffixes=(), http_prefixes=(), runtime_prefixes=("vendor/",))
    lookup = _fake_lookup([
        ("/srv/app/api/handlers.py", 42),
        ("/srv/app/vendor/lib.py", 9),
        ("/usr/local/go/src/runtime/asm_amd64.s", 1581),
    ])
    assert capture_callstack(0, lookup, frame_filter) == "api/handlers.py:42, runtime/asm_amd64.s:1581"


def test_caller_frame_reports_caller():
    """caller_frame(0) is the function that called it."""
    file, line = caller_frame(0)
    assert file == __file__
    assert line == test_caller_frame_reports_caller.__code__.co_firstlineno + 2


def test_caller_frame_end_of_stack():
    """Past the outermost frame the lookup returns None."""
    assert caller_frame(10_000) is None


def test_real_stack_excludes_threading():
    """A capture made inside a worker thread does not list threading.py."""
    results = []
    worker = threading.Thread(target=lambda: results.append(capture_callstack(1)))
    worker.start()
    worker.join()

    assert results
    assert results[0].startswith("tests/test_stack.py:")
    assert "threading.py" not in results[0]
