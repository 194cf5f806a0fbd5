"""Structured logging for auditrollup.

Events are produced with structlog and handed to the standard library
``logging`` tree, so third-party records and auditrollup events share one set
of handlers. Every event carries the package version, the current run's
correlation id (when one is active) and any fields bound with
:class:`bind_context`.

Output goes to stderr because reports are commonly streamed to stdout:

    from auditrollup.core.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    log = get_logger(__name__)
    log.debug("report_built", categories=4, score=87.5)
"""

import logging
import re
import sys
import uuid
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from auditrollup import __version__

if TYPE_CHECKING:
    from auditrollup.core.settings import AuditRollupSettings

MAX_EVENT_LENGTH = 10000

_TRUNCATION_MARKER = "... [TRUNCATED]"
_ANSI_SEQUENCE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

_METHOD_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "exception": logging.ERROR,
    "critical": logging.CRITICAL,
}

_run_id: ContextVar[str | None] = ContextVar("auditrollup_run_id", default=None)
_extra_fields: ContextVar[dict[str, Any]] = ContextVar(
    "auditrollup_log_fields", default={}
)

# logger-name prefix -> minimum level
_prefix_levels: dict[str, int] = {}


def _as_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


# -----------------------------------------------------------------------------
# Run correlation
# -----------------------------------------------------------------------------


def generate_correlation_id() -> str:
    """Return a fresh random run id."""
    return str(uuid.uuid4())


def get_correlation_id() -> str | None:
    return _run_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Attach ``correlation_id`` to all events logged from this context."""
    _run_id.set(correlation_id)


class correlation_context:
    """Tag every event logged inside the block with one run id.

    A new id is generated when none is given; the id is returned by
    ``__enter__`` so callers can echo it.
    """

    def __init__(self, correlation_id: str | None = None) -> None:
        self.correlation_id = correlation_id or generate_correlation_id()
        self._token: Token[str | None] | None = None

    def __enter__(self) -> str:
        self._token = _run_id.set(self.correlation_id)
        return self.correlation_id

    def __exit__(self, *exc_info: Any) -> None:
        if self._token is not None:
            _run_id.reset(self._token)


class bind_context:
    """Add fields to every event logged inside the block.

    Blocks nest; inner fields shadow outer ones and explicit event fields
    win over both.
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self._token: Token[dict[str, Any]] | None = None

    def __enter__(self) -> "bind_context":
        self._token = _extra_fields.set({**_extra_fields.get(), **self.fields})
        return self

    def __exit__(self, *exc_info: Any) -> None:
        if self._token is not None:
            _extra_fields.reset(self._token)


# -----------------------------------------------------------------------------
# Processors
# -----------------------------------------------------------------------------


def add_correlation_id(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    run_id = _run_id.get()
    if run_id is not None:
        event_dict["correlation_id"] = run_id
    return event_dict


def add_bound_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    for key, value in _extra_fields.get().items():
        event_dict.setdefault(key, value)
    return event_dict


def add_common_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("auditrollup_version", __version__)
    return event_dict


def sanitize_log_message(message: str) -> str:
    """Make an event name safe to print on a single log line.

    Line breaks are escaped, ANSI sequences are stripped and overlong text
    is cut to ``MAX_EVENT_LENGTH`` characters.
    """
    if not message:
        return message

    cleaned = _ANSI_SEQUENCE.sub(
        "", message.replace("\r", "\\r").replace("\n", "\\n")
    )
    if len(cleaned) > MAX_EVENT_LENGTH:
        keep = MAX_EVENT_LENGTH - len(_TRUNCATION_MARKER)
        cleaned = cleaned[:keep] + _TRUNCATION_MARKER
    return cleaned


def sanitize_event(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = sanitize_log_message(event)
    return event_dict


def filter_by_module_level(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Drop events below the level set for the closest matching logger prefix."""
    name = event_dict.get("logger")
    if not _prefix_levels or not name:
        return event_dict

    matches = [
        prefix
        for prefix in _prefix_levels
        if name == prefix or name.startswith(prefix + ".")
    ]
    if not matches:
        return event_dict

    threshold = _prefix_levels[max(matches, key=len)]
    if _METHOD_LEVELS.get(method_name.lower(), logging.INFO) < threshold:
        raise structlog.DropEvent
    return event_dict


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


def set_module_log_level(module: str, level: int | str) -> None:
    """Override the minimum level for ``module`` and its submodules."""
    _prefix_levels[module] = _as_level(level)


def get_module_log_level(module: str) -> int | None:
    return _prefix_levels.get(module)


def clear_module_log_levels() -> None:
    _prefix_levels.clear()


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_correlation_id,
        add_bound_context,
        add_common_fields,
        filter_by_module_level,
        sanitize_event,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]


def _handler(
    handler: logging.Handler, level: int, formatter: logging.Formatter
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
    module_levels: dict[str, str | int] | None = None,
) -> None:
    """Install auditrollup's logging setup on the root logger.

    Existing root handlers are replaced, so calling this twice is safe.

    Args:
        level: Minimum level for all handlers.
        json_output: Render JSON lines instead of the coloured console
            format. ``None`` picks JSON whenever stderr is not a terminal.
        log_file: Also append events to this file.
        module_levels: Per-logger-prefix level overrides.
    """
    if json_output is None:
        json_output = not sys.stderr.isatty()
    numeric_level = _as_level(level)

    for module, module_level in (module_levels or {}).items():
        set_module_log_level(module, module_level)

    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=shared
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.setLevel(numeric_level)

    root.addHandler(
        _handler(logging.StreamHandler(sys.stderr), numeric_level, formatter)
    )
    if log_file:
        root.addHandler(
            _handler(logging.FileHandler(log_file), numeric_level, formatter)
        )


def configure_logging_from_settings(
    settings: "AuditRollupSettings | None" = None, level: str | None = None
) -> None:
    """Configure logging from the ``logging`` section of the settings.

    Args:
        settings: Settings to read; the cached process settings when None.
        level: Overrides the configured level, e.g. for ``--verbose``.
    """
    from auditrollup.core.settings import get_cached_settings

    log_settings = (settings or get_cached_settings()).logging
    configure_logging(
        level=level or log_settings.level,
        json_output=log_settings.json_output,
        log_file=log_settings.file,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def reset_logging() -> None:
    """Undo :func:`configure_logging` and clear all context state."""
    clear_module_log_levels()
    _run_id.set(None)
    _extra_fields.set({})
    structlog.reset_defaults()

    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    for existing in list(root.handlers):
        root.removeHandler(existing)
