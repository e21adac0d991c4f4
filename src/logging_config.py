"""Process logging setup: one stdout handler, every record stamped with the request id."""

from __future__ import annotations

import logging
import re
from contextvars import ContextVar

_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("request_id", default=None)

_SENSITIVE_PATTERNS = [
    re.compile(r"(authorization\s*[:=]\s*bearer\s+)([^\s\"]+)", re.IGNORECASE),
    re.compile(r"(token\s*[:=]\s*)([^\s\",}]+)", re.IGNORECASE),
]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


def set_request_id(request_id: str | None) -> None:
    _REQUEST_ID_CTX.set(request_id)


def get_request_id() -> str | None:
    return _REQUEST_ID_CTX.get()


class RequestIdFilter(logging.Filter):
    """Attach ``request_id`` to every record so the format string can use it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = get_request_id() or "-"
        return True


class MaskingFormatter(logging.Formatter):
    """Blank out bearer tokens that end up in log messages."""

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        for pattern in _SENSITIVE_PATTERNS:
            formatted = pattern.sub(r"\1***", formatted)
        return formatted


def configure_logging(level: str = "info") -> None:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(MaskingFormatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(level.upper())
