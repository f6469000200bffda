"""
Structured logging for the maid café API.

Loggers accept keyword context::

    logger.info("Maid created", maid_id=maid.id)

Production writes one JSON object per line; development writes coloured
single lines. Both carry the request correlation id and redact any context
key that looks like a shared secret.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from cafe_shared.config.settings import Settings, settings

SERVICE_NAME = "maid-cafe-api"

# Context keys whose values are never written out in clear
_SECRET_MARKERS = ("password", "api_key", "apikey", "token", "secret")


def mask_secret(value: str | None) -> str:
    """Keep the first two characters so operators can tell which key is set."""
    if not value:
        return "<unset>"
    if len(value) <= 2:
        return "***"
    return f"{value[:2]}***"


def redact(context: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``context`` with secret-looking values masked."""
    cleaned = {}
    for key, value in context.items():
        if any(marker in key.lower() for marker in _SECRET_MARKERS):
            cleaned[key] = mask_secret(str(value) if value is not None else None)
        else:
            cleaned[key] = value
    return cleaned


def _context_of(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


def _request_id_of(record: logging.LogRecord) -> Optional[str]:
    request_id = getattr(record, "request_id", None)
    return request_id if request_id and request_id != "-" else None


class StructuredFormatter(logging.Formatter):
    """One JSON document per record, for log shipping in production."""

    def __init__(self, environment: str = "production", include_source: bool = False):
        super().__init__()
        self.environment = environment
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "environment": self.environment,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = _request_id_of(record)
        if request_id:
            payload["request_id"] = request_id
        context = _context_of(record)
        if context:
            payload["context"] = redact(context)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if self.include_source:
            payload["source"] = f"{record.pathname}:{record.lineno} in {record.funcName}"
        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured one-line output for a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        parts = [f"{color}{clock} {record.levelname:<8}{self.RESET}"]

        request_id = _request_id_of(record)
        if request_id:
            parts.append(f"{self.DIM}{request_id[:8]}{self.RESET}")
        parts.append(f"{record.name}: {record.getMessage()}")

        context = _context_of(record)
        if context:
            parts.append(" ".join(f"{k}={v}" for k, v in redact(context).items()))

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take keyword context instead of ``extra``."""

    def _emit(self, level: int, msg: str, args: tuple, exc_info: Any = None, **context: Any) -> None:
        if self.isEnabledFor(level):
            self._log(level, msg, args, exc_info=exc_info, extra={"context": context})

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.DEBUG, msg, args, **context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.INFO, msg, args, **context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.WARNING, msg, args, **context)

    def error(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.ERROR, msg, args, **context)

    def critical(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.CRITICAL, msg, args, **context)


logging.setLoggerClass(StructuredLogger)


def setup_logging(config: Optional[Settings] = None) -> None:
    """Install the stdout handler on the root logger. Called once at startup."""
    from cafe_shared.infrastructure.correlation import CorrelationIdFilter

    config = config or settings
    level = logging.DEBUG if config.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    if config.environment == "production":
        handler.setFormatter(StructuredFormatter(config.environment, include_source=config.debug))
    else:
        handler.setFormatter(DevelopmentFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("uvicorn.access", "httpx", "httpcore", "python_multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """``logging.getLogger`` typed as the structured logger."""
    return logging.getLogger(name)  # type: ignore[return-value]


api_logger = get_logger("cafe_api")
storage_logger = get_logger("cafe_api.storage")
auth_audit_logger = get_logger("cafe_api.auth")


def audit_auth_event(event_type: str, tier: str, success: bool = True, **context: Any) -> None:
    """
    Record a shared-secret check.

    ``tier`` is "maid" or "admin". Rejections are warnings so they surface in
    production logs without any extra configuration.
    """
    level = logging.INFO if success else logging.WARNING
    auth_audit_logger._emit(level, "Auth %s", (event_type,), event_type=event_type, tier=tier, success=success, **context)
