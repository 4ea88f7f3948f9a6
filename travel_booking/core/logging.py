"""Structured logging for the booking service.

Records are rendered as one JSON object per line in production and as plain
text in development. Persistence failures are reported to API callers only
as a generic SYSTEM_ERROR, so the log line is where the cause lives.
"""
import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import time
import traceback


# Attributes passed through ``extra=`` that end up in the JSON payload
CONTEXT_FIELDS = (
    "request_id", "method", "path", "status_code", "duration_ms",
    "employee_id", "booking_reference_id", "operation", "outcome", "error_type",
)

_HANDLER_MARKER = "_travel_booking"
_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a log record as a single JSON line.

    Besides the standard fields (timestamp, level, logger, message, source
    location) any attribute named in ``CONTEXT_FIELDS`` is copied across, so
    ``logger.info("...", extra={"booking_reference_id": ref})`` is searchable.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = self._base_fields(record)

        exception = self._exception_block(record)
        if exception:
            payload["exception"] = exception

        payload.update(
            (name, getattr(record, name)) for name in CONTEXT_FIELDS if hasattr(record, name)
        )
        return json.dumps(payload, default=str)

    @staticmethod
    def _base_fields(record: logging.LogRecord) -> Dict[str, Any]:
        return {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

    @staticmethod
    def _exception_block(record: logging.LogRecord) -> Optional[Dict[str, Any]]:
        if not record.exc_info or record.exc_info[0] is None:
            return None
        exc_type, exc_value, exc_tb = record.exc_info
        return {
            "type": exc_type.__name__,
            "message": str(exc_value),
            "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
        }


class ContextLogger(logging.LoggerAdapter):
    """Adapter that merges a fixed context into every record's ``extra``.

    Example:
        >>> log = ContextLogger(logging.getLogger(__name__), {"employee_id": "EMP9876"})
        >>> log.info("Registering employee")
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        merged = dict(kwargs.get("extra") or {})
        merged.update(self.extra)
        kwargs["extra"] = merged
        return msg, kwargs


def setup_logging(level: str = "INFO", json_format: bool = True) -> logging.Logger:
    """Install the service's stdout handler on the root logger.

    Calling it again (one call per ``create_app``) swaps the handler it
    installed earlier and leaves handlers added by others alone, e.g.
    pytest's capture handler.

    Args:
        level: Log level name; unknown names fall back to INFO
        json_format: JSON lines when True, plain text otherwise

    Returns:
        The root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    setattr(handler, _HANDLER_MARKER, True)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(_TEXT_FORMAT))
    root_logger.addHandler(handler)

    return root_logger


def get_logger(name: str, context: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """Module logger, wrapped in a ``ContextLogger`` when context is given."""
    logger = logging.getLogger(name)
    return ContextLogger(logger, context) if context else logger


class LogTimer:
    """Time a block and log its duration under ``operation``.

    Example:
        >>> with LogTimer(logger, "create_booking"):
        ...     outcome = service.create_booking(request)
    """

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return
        elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        extra = {"operation": self.operation, "duration_ms": round(elapsed_ms, 2)}

        if exc_type is None:
            self.logger.info(f"{self.operation} completed in {elapsed_ms:.1f}ms", extra=extra)
        else:
            self.logger.error(
                f"{self.operation} failed after {elapsed_ms:.1f}ms",
                extra=extra,
                exc_info=(exc_type, exc_val, exc_tb)
            )
