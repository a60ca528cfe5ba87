"""Diagnostic logging setup with JSON-lines or plain-text output.

Library modules only ever call ``logging.getLogger(__name__)``; nothing is
configured at import time. Applications (and the ``raddict`` CLI) call
``setup_logging`` once to attach sinks to the ``raddict`` logger tree.
"""

from __future__ import annotations

import atexit
import contextvars
import json
import logging
import math
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

_DEFAULT_LOG_FILENAME: Final[str] = "raddict.jsonl"
_DEFAULT_LOGGER_NAME: Final[str] = "raddict"
_PLAIN_FORMAT: Final[str] = "%(levelname)s %(name)s: %(message)s"

_STANDARD_LOG_RECORD_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
    }
)

_ContextState = tuple[tuple[str, str], ...]
_LOG_CONTEXT: contextvars.ContextVar[_ContextState] = contextvars.ContextVar(
    "raddict_log_context", default=()
)

_ACTIVE_HANDLE_LOCK = threading.Lock()
_ACTIVE_HANDLE: LoggingHandle | None = None
_ATEXIT_REGISTERED = False


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Sinks and format for the ``raddict`` logger tree."""

    level: int | str = "WARNING"
    logger_name: str = _DEFAULT_LOGGER_NAME
    log_dir: Path | str | None = None
    log_filename: str = _DEFAULT_LOG_FILENAME
    log_to_stderr: bool = True
    json_format: bool = False


def setup_logging(
    logging_config: Mapping[str, object] | None = None,
    *,
    level: int | str | None = None,
    logger_name: str = _DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Configure logging from a ``[logging]`` config mapping and return the logger.

    Parameters
    ----------
    logging_config:
        Mapping compatible with the ``[logging]`` table of ``raddict.toml``.
    level:
        Optional override for the configured level.
    logger_name:
        Logger name to configure.
    """

    cfg = dict(logging_config or {})
    raw_level = level if level is not None else cfg.get("level", "WARNING")
    resolved_level: int | str = raw_level if isinstance(raw_level, (int, str)) else "WARNING"
    raw_log_dir = cfg.get("log_dir")
    log_dir: Path | str | None = raw_log_dir if isinstance(raw_log_dir, (Path, str)) else None

    handle = setup_structured_logging(
        LoggingConfig(
            level=resolved_level,
            logger_name=logger_name,
            log_dir=log_dir or None,
            log_to_stderr=bool(cfg.get("log_to_stderr", True)),
            json_format=bool(cfg.get("json", False)),
        )
    )
    return handle.logger


class _JsonLineFormatter(logging.Formatter):
    """Formatter that emits canonical JSON objects per log line."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in sorted(get_log_context().items()):
            event[key] = value

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = extras

        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


class _PlainFormatter(logging.Formatter):
    """``LEVEL logger: message`` with bound context appended as ``key=value``."""

    def __init__(self) -> None:
        super().__init__(_PLAIN_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        rendered = super().format(record)
        context = get_log_context()
        if not context:
            return rendered
        suffix = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{rendered} [{suffix}]"


class LoggingHandle:
    """Runtime handle for an active logging setup."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        handlers: tuple[logging.Handler, ...],
        log_path: Path | None,
        previous_propagate: bool = True,
    ) -> None:
        self.logger = logger
        self.log_path = log_path
        self._handlers = handlers
        self._previous_propagate = previous_propagate
        self._shutdown_lock = threading.Lock()
        self._is_shutdown = False

    @property
    def is_shutdown(self) -> bool:
        return self._is_shutdown

    def flush(self) -> None:
        for handler in self._handlers:
            handler.flush()

    def shutdown(self) -> None:
        with self._shutdown_lock:
            if self._is_shutdown:
                return
            try:
                for handler in self._handlers:
                    _detach_handler(self.logger, handler)
            finally:
                self.logger.propagate = self._previous_propagate
                self._is_shutdown = True


def setup_structured_logging(config: LoggingConfig) -> LoggingHandle:
    """Attach the configured sinks to ``config.logger_name``, replacing earlier ones."""
    _shutdown_previous_active_handle()

    logger_name = _validate_logger_name(config.logger_name)
    level = _parse_log_level(config.level)
    formatter: logging.Formatter = (
        _JsonLineFormatter() if config.json_format else _PlainFormatter()
    )

    handlers: list[logging.Handler] = []
    log_path: Path | None = None
    if config.log_dir is not None:
        log_filename = _validate_log_filename(config.log_filename)
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / log_filename
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        # File sinks always write JSON lines.
        file_handler.setFormatter(_JsonLineFormatter())
        handlers.append(file_handler)

    if config.log_to_stderr:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(formatter)
        handlers.append(stderr_handler)

    logger = logging.getLogger(logger_name)
    previous_propagate = logger.propagate
    logger.setLevel(level)
    logger.propagate = False

    for existing in list(logger.handlers):
        _detach_handler(logger, existing)

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    handle = LoggingHandle(
        logger=logger,
        handlers=tuple(handlers),
        log_path=log_path,
        previous_propagate=previous_propagate,
    )

    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        _ACTIVE_HANDLE = handle

    _register_atexit_shutdown()
    return handle


def shutdown_logging(handle: LoggingHandle | None = None) -> None:
    """Detach and close all sinks of ``handle`` (default: the active handle)."""
    resolved = handle if handle is not None else get_active_logging_handle()
    if resolved is None:
        return

    resolved.shutdown()

    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        if _ACTIVE_HANDLE is resolved:
            _ACTIVE_HANDLE = None


def get_active_logging_handle() -> LoggingHandle | None:
    with _ACTIVE_HANDLE_LOCK:
        return _ACTIVE_HANDLE


def get_log_context() -> dict[str, str]:
    """Return the fields currently bound with ``log_context``."""
    return dict(_LOG_CONTEXT.get())


@contextmanager
def log_context(**fields: str | None) -> Iterator[None]:
    """Temporarily bind fields (for example ``dictionary=<path>``) to every record."""
    state = get_log_context()
    for key, value in fields.items():
        if value is None:
            state.pop(key, None)
            continue
        state[key] = str(value)
    token = _LOG_CONTEXT.set(tuple(state.items()))
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _shutdown_previous_active_handle() -> None:
    existing = get_active_logging_handle()
    if existing is not None:
        existing.shutdown()

    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        _ACTIVE_HANDLE = None


def _detach_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    # A stream sink may outlive its stream (captured stderr, closed pipes).
    try:
        with suppress(ValueError, OSError):
            handler.flush()
    finally:
        logger.removeHandler(handler)
        with suppress(ValueError, OSError):
            handler.close()


def _register_atexit_shutdown() -> None:
    global _ATEXIT_REGISTERED
    if _ATEXIT_REGISTERED:
        return
    atexit.register(shutdown_logging)
    _ATEXIT_REGISTERED = True


def _validate_log_filename(log_filename: str) -> str:
    normalized = log_filename.strip()
    if not normalized:
        raise ValueError("log_filename must not be empty")
    if Path(normalized).name != normalized:
        raise ValueError("log_filename must not include path separators")
    return normalized


def _validate_logger_name(logger_name: str) -> str:
    if not isinstance(logger_name, str):
        raise ValueError(f"logger_name must be a string, got {type(logger_name).__name__}")
    normalized = logger_name.strip()
    if not normalized:
        raise ValueError("logger_name must not be empty")
    return normalized


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        raise ValueError(f"level must be int or str, got {type(value).__name__}")

    normalized = value.strip().upper()
    parsed = logging.getLevelName(normalized)
    if isinstance(parsed, int):
        return parsed

    raise ValueError(f"unsupported logging level {value!r}")


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    fields: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS or key.startswith("_"):
            continue
        fields[key] = _normalize_json_value(value)
    return fields


def _normalize_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_json_value(item) for item in value]
    return repr(value)


__all__ = [
    "JSONValue",
    "LoggingConfig",
    "LoggingHandle",
    "get_active_logging_handle",
    "get_log_context",
    "log_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
