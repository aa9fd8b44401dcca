"""
Logging Configuration and Utilities

Structured logging through structlog, rendered by the standard library
handlers so that SQLAlchemy, uvicorn and application events share one
output stream (JSON or console). In JSON mode each structlog event is
handed over as record extras and python-json-logger writes one flat JSON
object per line. Event keys must not reuse LogRecord attribute names
such as ``name`` or ``module``.
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger

from gym_billing.config.settings import settings

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
gym_id: ContextVar[Optional[int]] = ContextVar('gym_id', default=None)

_configured = False


class RequestContextProcessor:
    """Add request context to log records"""

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict['request_id'] = req_id

        current_gym = gym_id.get()
        if current_gym is not None:
            event_dict.setdefault('gym_id', current_gym)

        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        event_dict['service'] = 'gym-billing'
        event_dict['environment'] = settings.ENVIRONMENT
        return event_dict


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['line'] = record.lineno

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


class LoggingConfig:
    """Centralized logging configuration"""

    @staticmethod
    def configure_structured_logging():
        """Configure structured logging with structlog"""

        processors = [
            structlog.contextvars.merge_contextvars,
            RequestContextProcessor(),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if settings.LOG_FORMAT == "json":
            # Event fields become LogRecord extras; CustomJsonFormatter renders them
            processors.append(structlog.stdlib.render_to_log_kwargs)
        else:
            processors.append(structlog.processors.KeyValueRenderer(key_order=['event']))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging():
        """Configure standard Python logging"""

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        if settings.LOG_FORMAT == "json":
            formatter = CustomJsonFormatter('%(asctime)s %(name)s %(levelname)s %(message)s')
        else:
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        LoggingConfig._configure_library_loggers()

    @staticmethod
    def _configure_library_loggers():
        """Reduce noise from external libraries"""
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        if settings.DATABASE_ECHO:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
        else:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)


def configure_logging(force: bool = False) -> None:
    """Initialize logging configuration once per process."""
    global _configured
    if _configured and not force:
        return
    LoggingConfig.configure_structured_logging()
    LoggingConfig.configure_standard_logging()
    _configured = True

    get_logger(__name__).info(
        "logging.initialized",
        log_level=settings.LOG_LEVEL,
        log_format=settings.LOG_FORMAT,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger bound to ``name``.

    Args:
        name: Logger name, usually the caller's ``__name__``

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


__all__ = [
    'configure_logging',
    'get_logger',
    'LoggingConfig',
    'request_id',
    'gym_id',
]
