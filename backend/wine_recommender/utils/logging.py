"""Structured logging configuration"""

import logging
import sys
import structlog
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "wine-recommender"


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog with JSON output

    Request-scoped values bound with `bind_request_context` (session id,
    request path) are merged into every event logged while handling the
    request.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance

    Loggers are lazy proxies, so module-level loggers created before
    `setup_logging` still pick up its configuration.
    """
    return structlog.get_logger(name)


def bind_request_context(**values) -> None:
    """Attach values (e.g. session_id) to all events of the current request"""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter for standard-library loggers (uvicorn)"""

    def __init__(self, *args, version: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self.version = version

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['service'] = SERVICE_NAME
        log_record['version'] = self.version
        log_record['level'] = record.levelname.lower()

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


def configure_uvicorn_logging(version: str = "") -> None:
    """Send uvicorn's access and error logs through the JSON formatter"""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ServiceJsonFormatter(
        '%(timestamp)s %(name)s %(message)s',
        timestamp=True,
        version=version
    ))

    for name in ("uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False
