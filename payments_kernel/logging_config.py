"""
Structured JSON logging for the payments kernel.

Each record is written as one JSON object.  Records emitted inside a
PaymentOrchestrator call carry that call's correlation_id, caller_id and
operation.  Records logged with exc_info carry the failure's code, its
ErrorKind and the status http_status_for() would answer with, so rejected
requests (input_data) and faults (server_side) can be told apart in the
log stream without parsing messages.
"""

__all__ = [
    "CONTEXT_FIELDS",
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from payments_kernel.exceptions import ErrorKind, PaymentsKernelError, http_status_for

LOGGER_NAMESPACE = "payments_kernel"

CONTEXT_FIELDS = ("correlation_id", "caller_id", "operation")

# Replaced, never mutated in place, so a reset token restores the outer scope.
_bound_fields: ContextVar[dict[str, str]] = ContextVar("payments_log_fields", default={})


class LogContext:
    """Fields describing the payment operation running in this context."""

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_bound_fields.get())

    @staticmethod
    def clear() -> None:
        _bound_fields.set({})

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """
        Add fields for the duration of a with-block.

        None values are skipped, so an inner bind never erases an outer
        field.  Only CONTEXT_FIELDS may be bound.
        """
        unknown = sorted(set(fields) - set(CONTEXT_FIELDS))
        if unknown:
            raise TypeError(f"Unknown log context fields: {', '.join(unknown)}")
        merged = dict(_bound_fields.get())
        merged.update((k, v) for k, v in fields.items() if v is not None)
        token = _bound_fields.set(merged)
        try:
            yield
        finally:
            _bound_fields.reset(token)


# Attributes every LogRecord has; anything else on a record came from extra=
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)


def _failure_fields(exc: BaseException) -> dict[str, Any]:
    """Describe exc the way the routing layer will answer it."""
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
        "exc_status": http_status_for(exc),
    }
    if not isinstance(exc, PaymentsKernelError):
        fields["exc_kind"] = ErrorKind.SERVER_SIDE.value
        return fields

    fields["exc_code"] = exc.code
    fields["exc_kind"] = exc.kind.value
    # job_id, profile_id, cap, ... as stored by the constructor
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for name, value in record.__dict__.items():
            if name not in _RECORD_ATTRS:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_failure_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the payments_kernel namespace."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


# Marks handlers installed by configure_logging so reset_logging leaves
# handlers added by others (pytest, captured_logs) alone.
_KERNEL_HANDLER = "_payments_kernel_handler"
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install the JSON handler on the payments_kernel logger.

    Only the first call has an effect; later ones (init_engine, the CLI)
    keep whatever level and destination were chosen first.
    """
    root = logging.getLogger(LOGGER_NAMESPACE)
    with _lock:
        if any(getattr(h, _KERNEL_HANDLER, False) for h in root.handlers):
            return
        target = handler or logging.StreamHandler(stream or sys.stderr)
        setattr(target, _KERNEL_HANDLER, True)
        target.setFormatter(StructuredFormatter())
        root.addHandler(target)
        root.setLevel(level)
        root.propagate = False


def reset_logging() -> None:
    """Remove the handler configure_logging installed. For tests."""
    root = logging.getLogger(LOGGER_NAMESPACE)
    with _lock:
        for h in [h for h in root.handlers if getattr(h, _KERNEL_HANDLER, False)]:
            root.removeHandler(h)
        root.setLevel(logging.NOTSET)
        root.propagate = True
