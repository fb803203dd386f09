"""
Structured logging configuration: time, level, msg, then sorted fields.

structlog is the collaborator every Entry delegates to. The renderer is picked
by LOG_FORMAT: "text" (logfmt-style key="value" line), "json" or "console".
Exception-valued fields are rendered as their message, plus a stacktrace field
naming the file:function:line where the error was raised or wrapped.

Uses only Python stdlib logging and structlog; imports nothing from logjack.entry
to avoid circular imports.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from types import TracebackType
from typing import Any, Optional, Tuple

import structlog

from logjack.config import Settings, get_settings
from logjack.core.exceptions import StackError
from logjack.stack import shorten_path

ERROR_KEY = "err"
STACKTRACE_KEY = "stacktrace"

_LEADING_KEYS = ("time", "level", "msg")

FIELD_PREFIX = "fields."
# Keys the processor chain writes itself; user fields with these names are prefixed.
RESERVED_KEYS = ("time", "level", "msg")


def prefix_clashing_fields(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Move user fields named time, level or msg to fields.<key>."""
    for key in RESERVED_KEYS:
        if key in event_dict:
            event_dict[FIELD_PREFIX + key] = event_dict.pop(key)
    return event_dict


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure time is always present (ISO 8601, UTC)."""
    if "time" not in event_dict:
        event_dict["time"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _error_site(err: BaseException) -> Optional[Tuple[str, str, int]]:
    if isinstance(err, StackError):
        return err.site
    tb: Optional[TracebackType] = err.__traceback__
    if tb is None:
        return None
    while tb.tb_next is not None:
        tb = tb.tb_next
    code = tb.tb_frame.f_code
    return code.co_filename, code.co_name, tb.tb_lineno


def format_error_fields(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Replace exception values with their message and add a stacktrace field.

    The "err" field gets "stacktrace"; any other key gets "<key>_stacktrace".
    Existing fields with those names are left alone.
    """
    for key, value in list(event_dict.items()):
        if not isinstance(value, BaseException):
            continue
        event_dict[key] = str(value) or type(value).__name__
        site = _error_site(value)
        if site is None:
            continue
        stack_key = STACKTRACE_KEY if key == ERROR_KEY else f"{key}_{STACKTRACE_KEY}"
        if stack_key not in event_dict:
            file, function, line = site
            event_dict[stack_key] = f"{shorten_path(file)}:{function}:{line}"
    return event_dict


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(str(value), ensure_ascii=False)


class TextRenderer:
    """
    Render an event dict as one logfmt-style line.

    time, level and msg (structlog's "event") lead; the other keys follow in
    sorted order. Strings are always double-quoted.
    """

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> str:
        fields = dict(event_dict)
        if "event" in fields:
            fields["msg"] = fields.pop("event")
        ordered = [k for k in _LEADING_KEYS if k in fields]
        ordered += sorted(k for k in fields if k not in _LEADING_KEYS)
        return " ".join(f"{k}={_format_value(fields[k])}" for k in ordered)


def build_processors(log_format: str = "text") -> list[Any]:
    """Shared processor chain ending in the renderer for log_format."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        prefix_clashing_fields,
        structlog.processors.add_log_level,
        format_error_fields,
        _add_timestamp,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    elif log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors.append(TextRenderer())
    return processors


def configure_structlog(settings: Optional[Settings] = None) -> None:
    """Configure structlog: processors, level filter, output stream."""
    settings = settings or get_settings()
    structlog.configure(
        processors=build_processors(settings.log_format),
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=settings.output_stream),
        cache_logger_on_first_use=True,
    )


# One-time configuration on first import
if not structlog.is_configured():
    configure_structlog()


_default_logger: Optional[Any] = None


def default_logger() -> Any:
    """
    Return the process-wide logger handle used when no logger is injected.

    Created on first call and never reassigned.
    """
    global _default_logger
    if _default_logger is None:
        _default_logger = structlog.get_logger()
    return _default_logger


def get_logger(name: str) -> Any:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("entry_emitted", fields=3)
    Output (text): time="..." level="info" msg="entry_emitted" fields=3 logger="module.name"
    """
    return structlog.get_logger(name).bind(logger=name)
