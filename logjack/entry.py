"""
Entry builder: accumulate fields for one log event, then emit it.

Use add_field / add_fields (instead of structlog's bind) to attach context,
add_callstack for source file and line information, and one of info, warn,
error or fatal to write the entry. Each Entry is single-use.

    entry = new_entry()
    entry.add_field("wallet", addr)
    entry.add_error(err)
    entry.error("scan failed")
"""

from __future__ import annotations

import os
import sys
from typing import Any, Callable, Mapping, NoReturn, Optional, Sequence

import structlog

from logjack.config.env import get_fatal_exit_code
from logjack.core.exceptions import RenderError
from logjack.logging.logger import ERROR_KEY, FIELD_PREFIX, default_logger
from logjack.stack import (
    CALLSTACK_KEY,
    DEFAULT_FILTER,
    FrameFilter,
    FrameLookup,
    caller_frame,
    capture_callstack,
)

ExitFunc = Callable[[int], Any]

# Frames between capture_callstack and the user's code:
# capture_callstack, Entry._add_callstack, and the public caller.
_CALLSTACK_SKIP = 3

# structlog puts the message under this key; a user field of that name is kept as fields.event.
_EVENT_KEY = "event"


def _hard_exit(code: int) -> NoReturn:
    """Flush stdio and terminate immediately; atexit handlers do not run."""
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(code)


def _join(args: Sequence[Any]) -> str:
    return " ".join(str(a) for a in args)


def _with_context(logger: Any, values: Mapping[str, Any]) -> Any:
    """
    Return a copy of a bound logger with values merged into its context.

    Same construction as BoundLoggerBase.bind, without routing keys through
    keyword arguments, so names like "self" are accepted.
    """
    context = structlog.get_context(logger)
    new_context = context.__class__(context)
    new_context.update(values)
    return logger.__class__(logger._logger, logger._processors, new_context)


def _move_event_field(fields: Mapping[str, Any]) -> dict[str, Any]:
    moved = dict(fields)
    if _EVENT_KEY in moved:
        moved[FIELD_PREFIX + _EVENT_KEY] = moved.pop(_EVENT_KEY)
    return moved


def _partial_text(event_dict: Any) -> str:
    if isinstance(event_dict, Mapping):
        return " ".join(f"{k}={v!r}" for k, v in event_dict.items())
    return str(event_dict)


class Entry:
    """
    One in-progress log record wrapping a structlog bound logger.

    Every mutation rebinds and replaces the wrapped logger; structlog never
    mutates a bound logger in place. Not safe for concurrent mutation.

    Args:
        logger: structlog logger to delegate to. Defaults to the process-wide handle.
        processors: processor chain used by render(). Defaults to structlog's
            configured processors.
        exit_func: called with the exit code after a fatal entry is written.
        exit_code: non-zero status passed to exit_func. Defaults to
            LOGJACK_FATAL_EXIT_CODE (1).
        frame_lookup: stack introspection used by add_callstack.
        frame_filter: exclusion rules used by add_callstack.
    """

    def __init__(
        self,
        logger: Any = None,
        processors: Optional[Sequence[Any]] = None,
        exit_func: Optional[ExitFunc] = None,
        exit_code: Optional[int] = None,
        frame_lookup: FrameLookup = caller_frame,
        frame_filter: FrameFilter = DEFAULT_FILTER,
    ):
        if logger is None:
            logger = default_logger()
        self._logger = logger.bind()
        self._processors = processors
        self._exit = exit_func or _hard_exit
        self._exit_code = exit_code
        self._frame_lookup = frame_lookup
        self._frame_filter = frame_filter

    @property
    def fields(self) -> dict[str, Any]:
        """Copy of the fields attached so far."""
        return dict(structlog.get_context(self._logger))

    def add_field(self, key: str, value: Any) -> None:
        """Attach a single field; an existing key is overwritten."""
        self._logger = _with_context(self._logger, {str(key): value})

    def add_fields(self, fields: Mapping[Any, Any]) -> None:
        """Attach every item of fields; keys are converted with str()."""
        self._logger = _with_context(self._logger, {str(k): v for k, v in fields.items()})

    def add_error(self, err: Optional[BaseException]) -> None:
        """Attach err under the "err" key."""
        self.add_field(ERROR_KEY, err)

    def add_callstack(self) -> None:
        """
        Attach the current call stack under the "callstack" key.

        The first frame is the caller of add_callstack. Frames from the HTTP
        server, threading and asyncio machinery and synthetic code objects are
        excluded. The field is always attached, possibly as an empty string.
        """
        self._add_callstack(_CALLSTACK_SKIP)

    def _add_callstack(self, skip: int) -> None:
        stack = capture_callstack(skip, self._frame_lookup, self._frame_filter)
        self.add_field(CALLSTACK_KEY, stack)

    def _emitter(self) -> Any:
        context = structlog.get_context(self._logger)
        if _EVENT_KEY not in context:
            return self._logger
        logger = self._logger
        return logger.__class__(logger._logger, logger._processors, context.__class__(_move_event_field(context)))

    def info(self, *args: Any) -> None:
        self._emitter().info(_join(args))

    def infof(self, fmt: str, *args: Any) -> None:
        self._emitter().info(fmt, *args)

    def warn(self, *args: Any) -> None:
        self._emitter().warning(_join(args))

    def warnf(self, fmt: str, *args: Any) -> None:
        self._emitter().warning(fmt, *args)

    def error(self, *args: Any) -> None:
        self._emitter().error(_join(args))

    def errorf(self, fmt: str, *args: Any) -> None:
        self._emitter().error(fmt, *args)

    def fatal(self, *args: Any) -> NoReturn:
        """
        Write the entry at critical level, then terminate the process.

        The exit hook runs even when writing the entry raises.
        """
        try:
            self._emitter().critical(_join(args))
        finally:
            self._terminate()

    def fatalf(self, fmt: str, *args: Any) -> NoReturn:
        """
        Write the entry at critical level, then terminate the process.

        The exit hook runs even when formatting or writing the entry raises.
        """
        try:
            self._emitter().critical(fmt, *args)
        finally:
            self._terminate()

    def _terminate(self) -> NoReturn:
        code = self._exit_code if self._exit_code is not None else get_fatal_exit_code()
        self._exit(code)
        # exit_func must not return
        raise SystemExit(code)

    def render(self) -> str:
        """
        Run the processor chain over the fields without writing anywhere.

        Raises:
            RenderError: a processor failed or produced no text.
        """
        processors = self._processors
        if processors is None:
            processors = structlog.get_config()["processors"]
        event_dict: Any = _move_event_field(self.fields)
        try:
            for processor in processors:
                event_dict = processor(self._logger, "info", event_dict)
        except (Exception, structlog.DropEvent) as exc:
            raise RenderError(str(exc) or type(exc).__name__, partial=_partial_text(event_dict)) from exc
        if isinstance(event_dict, bytes):
            return event_dict.decode("utf-8", errors="replace")
        if isinstance(event_dict, str):
            return event_dict
        raise RenderError("no renderer in processor chain", partial=_partial_text(event_dict))

    def __str__(self) -> str:
        try:
            return self.render()
        except RenderError as exc:
            return f"{exc.partial} - <{exc}>"

    def __repr__(self) -> str:
        return f"Entry({self.fields!r})"


def new_entry(logger: Any = None, **options: Any) -> Entry:
    """Create an empty Entry. Options are passed to Entry."""
    return Entry(logger, **options)


def callstack(err: Optional[BaseException] = None, logger: Any = None, **options: Any) -> Entry:
    """
    Create an Entry with the caller's call stack attached.

    If err is not None, it is attached under "err".
    """
    entry = Entry(logger, **options)
    entry._add_callstack(_CALLSTACK_SKIP)
    if err is not None:
        entry.add_error(err)
    return entry
