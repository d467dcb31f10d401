"""
GuildStay Logging Subsystem

Purpose
-------
One logging setup for the whole process:

- ContextVar-bound call context (user, guild, stay, operation, correlation id)
  copied onto every record.
- Structured fields via `extra={...}`; JSONFormatter emits them under "extra".
- Records are handed to a bounded queue and written to stdout by a
  QueueListener thread, so async code never blocks on console I/O.

Public API
----------
- get_logger(name)
- LogContext(...)                 sync and async context manager
- set_log_context / get_log_context / clear_log_context
- setup_logging / shutdown_logging
- get_logging_health()

Output format follows Config: JSON when LOG_JSON is set or in production,
plain text otherwise.
"""

from __future__ import annotations

import json
import logging
import queue
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Dict, Optional

from guildstay.core.config.config import Config

_call_context: ContextVar[Dict[str, Any]] = ContextVar("guildstay_call_context", default={})

CONTEXT_FIELDS = (
    "user_id",
    "guild_id",
    "stay_id",
    "correlation_id",
    "component",
    "operation",
)

# Attribute names every LogRecord carries; anything else came from extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
QUEUE_MAX_SIZE = 10_000

_INIT_FLAG = "_guildstay_logging_initialized"


def _level_from_config() -> int:
    name = getattr(Config, "LOG_LEVEL", "INFO")
    if not isinstance(name, str):
        return logging.INFO
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _json_from_config() -> bool:
    flag = getattr(Config, "LOG_JSON", None)
    if flag is not None:
        return bool(flag)
    return str(getattr(Config, "ENVIRONMENT", "")).lower() == "production"


# ============================================================================
# Health
# ============================================================================


@dataclass(frozen=True)
class LoggingHealth:
    initialized: bool
    queue_size: int
    queue_max_size: int
    records_enqueued: int
    records_dropped: int
    listener_errors: int


@dataclass
class _LoggingState:
    log_queue: Optional["queue.Queue[logging.LogRecord]"] = None
    listener: Optional[QueueListener] = None
    counters: Dict[str, int] = field(
        default_factory=lambda: {"enqueued": 0, "dropped": 0, "listener_errors": 0}
    )


_state = _LoggingState()


# ============================================================================
# Filter, formatter, queue plumbing
# ============================================================================


class ContextFilter(logging.Filter):
    """Copy the bound call context onto the record, keeping explicit extras."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        bound = _call_context.get()
        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                continue
            value = bound.get(name)
            if name == "component" and not value:
                value = record.name.partition(".")[0]
            setattr(record, name, value if value else "N/A")
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; context fields flat, extras nested."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value not in (None, "N/A"):
                payload[name] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in CONTEXT_FIELDS
            and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, ensure_ascii=False, default=str)


class _BoundedQueueHandler(QueueHandler):
    """Drops records instead of blocking when the queue is full."""

    def enqueue(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            _state.counters["dropped"] += 1
            sys.stderr.write("guildstay: log queue full, record dropped\n")
            return
        _state.counters["enqueued"] += 1


class _CountingListener(QueueListener):
    def handleError(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        _state.counters["listener_errors"] += 1
        sys.stderr.write("guildstay: log handler failed while writing a record\n")


# ============================================================================
# Setup / teardown
# ============================================================================


def setup_logging() -> None:
    """Install the queue-backed console pipeline on the root logger (once)."""
    root = logging.getLogger()
    if getattr(root, _INIT_FLAG, False):
        return

    level = _level_from_config()
    context_filter = ContextFilter()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(
        JSONFormatter()
        if _json_from_config()
        else logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)
    )
    # Root filters do not see records from child loggers
    console.addFilter(context_filter)

    _state.log_queue = queue.Queue(QUEUE_MAX_SIZE)
    _state.counters = {"enqueued": 0, "dropped": 0, "listener_errors": 0}
    _state.listener = _CountingListener(_state.log_queue, console, respect_handler_level=True)
    _state.listener.start()

    queue_handler = _BoundedQueueHandler(_state.log_queue)
    queue_handler.setLevel(level)
    queue_handler.addFilter(context_filter)

    root.handlers.clear()
    root.filters.clear()
    root.setLevel(level)
    root.addFilter(context_filter)
    root.addHandler(queue_handler)

    for noisy in ("sqlalchemy.engine", "asyncio", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    setattr(root, _INIT_FLAG, True)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={
            "log_level": logging.getLevelName(level),
            "json": _json_from_config(),
            "queue_max_size": QUEUE_MAX_SIZE,
        },
    )


def shutdown_logging() -> None:
    """Flush the queue and detach the pipeline from the root logger."""
    root = logging.getLogger()
    if not getattr(root, _INIT_FLAG, False):
        return

    logging.getLogger(__name__).info("Shutting down logging subsystem")

    listener, _state.listener = _state.listener, None
    if listener is not None:
        listener.stop()

    for handler in [h for h in root.handlers if isinstance(h, _BoundedQueueHandler)]:
        root.removeHandler(handler)
        handler.close()

    root.filters.clear()
    _state.log_queue = None
    setattr(root, _INIT_FLAG, False)


def get_logging_health() -> LoggingHealth:
    log_queue = _state.log_queue
    return LoggingHealth(
        initialized=bool(getattr(logging.getLogger(), _INIT_FLAG, False)),
        queue_size=log_queue.qsize() if log_queue is not None else 0,
        queue_max_size=log_queue.maxsize if log_queue is not None else 0,
        records_enqueued=_state.counters["enqueued"],
        records_dropped=_state.counters["dropped"],
        listener_errors=_state.counters["listener_errors"],
    )


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


def _as_text(value: Optional[int]) -> str:
    return str(value) if value is not None else "N/A"


class LogContext:
    """
    Bind call context to every record logged inside the block.

    Usage:
        async with LogContext(user_id=7, stay_id=42, operation="award"):
            logger.info("...")
    """

    def __init__(
        self,
        user_id: Optional[int] = None,
        guild_id: Optional[int] = None,
        stay_id: Optional[int] = None,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        self.context: Dict[str, Any] = {
            "user_id": _as_text(user_id),
            "guild_id": _as_text(guild_id),
            "stay_id": _as_text(stay_id),
            "component": component,
            "operation": operation,
            "correlation_id": correlation_id or uuid.uuid4().hex[:8],
            **extra,
        }
        self._token: Optional[Token[Dict[str, Any]]] = None

    def __enter__(self) -> "LogContext":
        self._token = _call_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _call_context.reset(self._token)
            self._token = None

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def set_log_context(
    user_id: Optional[int] = None,
    guild_id: Optional[int] = None,
    stay_id: Optional[int] = None,
    component: Optional[str] = None,
    operation: Optional[str] = None,
    correlation_id: Optional[str] = None,
    **extra: Any,
) -> None:
    """Merge values into the current context (None leaves a key unchanged)."""
    updates: Dict[str, Any] = {
        "user_id": user_id if user_id is None else str(user_id),
        "guild_id": guild_id if guild_id is None else str(guild_id),
        "stay_id": stay_id if stay_id is None else str(stay_id),
        "component": component,
        "operation": operation,
        "correlation_id": correlation_id,
        **extra,
    }
    merged = dict(_call_context.get())
    merged.update({key: value for key, value in updates.items() if value is not None})
    _call_context.set(merged)


def get_log_context() -> Dict[str, Any]:
    return dict(_call_context.get())


def clear_log_context() -> None:
    _call_context.set({})


setup_logging()
