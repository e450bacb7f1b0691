"""Structured JSON logging tagged with the request correlation ID"""
import json
import logging
import uuid
from contextvars import ContextVar
from typing import Any, Optional

SERVICE_NAME = "categorizer-api"

# Loggers that report every outbound request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


class CorrelationIdFilter(logging.Filter):
    """Copies the current correlation ID onto each record"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get()
        return True


class StructuredFormatter(logging.Formatter):
    """Renders a record as one JSON document per line"""

    def __init__(self, service_name: str = SERVICE_NAME, datefmt: Optional[str] = None):
        super().__init__(datefmt=datefmt)
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        corr_id = getattr(record, "correlation_id", None)
        if corr_id:
            document["correlation_id"] = corr_id

        document.update(getattr(record, "context", None) or {})

        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)

        return json.dumps(document, default=str)


def setup_logging(log_level: str = "INFO", service_name: str = SERVICE_NAME) -> None:
    """Send JSON lines for every logger to stderr"""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(service_name))
    handler.addFilter(CorrelationIdFilter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """Bind a correlation ID to the current context, generating one if absent"""
    if corr_id is None:
        corr_id = str(uuid.uuid4())
    correlation_id.set(corr_id)
    return corr_id


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    exc_info: bool = False,
    **context: Any
) -> None:
    """Log message with keyword fields merged into the JSON document"""
    logger.log(
        logging.getLevelName(level.upper()),
        message,
        exc_info=exc_info,
        extra={"context": context},
        stacklevel=2
    )
