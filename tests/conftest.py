"""
Pytest fixtures for logjack tests. Entries are built on a capturing structlog
logger and an exit hook that records instead of terminating the process.
"""

from __future__ import annotations

import logging

import pytest
import structlog
from structlog.testing import LogCapture

from logjack.logging import build_processors


class ExitCalled(Exception):
    """Raised by the recording exit hook in place of process termination."""


@pytest.fixture
def log_capture():
    return LogCapture()


@pytest.fixture
def capturing_logger(log_capture):
    """structlog logger whose events land in log_capture and are never printed."""
    return structlog.wrap_logger(
        None,
        processors=[log_capture],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )


@pytest.fixture
def text_processors():
    return build_processors("text")


@pytest.fixture
def exit_calls():
    """Exit hook that records the status and stops the caller by raising ExitCalled."""
    calls: list[int] = []

    def hook(code: int) -> None:
        calls.append(code)
        raise ExitCalled(code)

    hook.calls = calls
    return hook


@pytest.fixture
def restore_structlog():
    """Put back the structlog configuration a test replaced."""
    saved = structlog.get_config()
    yield
    structlog.configure(**saved)
