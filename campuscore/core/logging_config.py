"""
CampusCore - Centralized Logging Configuration
Supports both development (plain text) and production (JSON structured) logging
"""

import logging
import sys
import json
import traceback
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from campuscore.core.config import settings


# Context variables for tracing record operations
entity_var: ContextVar[str] = ContextVar('entity', default='')
request_seq_var: ContextVar[int] = ContextVar('request_seq', default=0)


def get_entity() -> str:
    """Get current entity name from context"""
    return entity_var.get() or ''


def set_entity(entity: str) -> None:
    """Set entity name in context"""
    entity_var.set(entity)


def get_request_seq() -> int:
    """Get current load sequence number from context"""
    return request_seq_var.get()


def set_request_seq(seq: int) -> None:
    """Set load sequence number in context"""
    request_seq_var.set(seq)


_STANDARD_RECORD_KEYS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'taskName', 'entity', 'request_seq',
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging in production
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        entity = get_entity()
        if entity:
            log_data["entity"] = entity

        request_seq = get_request_seq()
        if request_seq:
            log_data["request_seq"] = request_seq

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info) if record.exc_info[0] else None
            }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_KEYS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """
    Formatter that includes context variables (entity, request_seq)
    Used for development with readable output
    """

    def format(self, record: logging.LogRecord) -> str:
        record.entity = get_entity() or '-'
        record.request_seq = get_request_seq() or '-'

        return super().format(record)


class CampusCoreLogger(logging.Logger):
    """
    Custom logger with convenience methods for structured logging
    """

    def log_request(self, method: str, table: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Log record service request details"""
        self.debug(
            f"Records {method} {table} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "records_request",
                "http_method": method,
                "records_table": table,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_mutation(self, entity: str, action: str, outcome: str,
                     record_id: Optional[Any] = None, **kwargs) -> None:
        """Log the terminal outcome of a mutation"""
        level = logging.WARNING if outcome in ("failure", "partial") else logging.INFO
        self.log(
            level,
            f"{entity} {action}: {outcome}" +
            (f" (id={record_id})" if record_id is not None else ""),
            extra={
                "event_type": "mutation",
                "mutation_entity": entity,
                "mutation_action": action,
                "mutation_outcome": outcome,
                "record_id": record_id,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: str = None,
                               **kwargs) -> None:
        """Log error with full context"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {str(error)}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )


def setup_logging() -> CampusCoreLogger:
    """Setup logging configuration based on environment"""

    logging.setLoggerClass(CampusCoreLogger)

    logger = logging.getLogger("campuscore")
    logger.__class__ = CampusCoreLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))

    logger.handlers.clear()

    is_production = settings.ENVIRONMENT == "production"

    if is_production:
        json_formatter = JSONFormatter()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(json_formatter)
        logger.addHandler(console_handler)

        if settings.LOG_FILE:
            log_file = Path(settings.LOG_FILE)
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10485760,  # 10MB
                backupCount=10
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(json_formatter)
            logger.addHandler(file_handler)

    else:
        detailed_format = (
            "%(asctime)s | %(levelname)-8s | "
            "[%(entity)s] [seq=%(request_seq)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        simple_format = "%(levelname)-8s | %(message)s"

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(ContextualFormatter(simple_format))
        logger.addHandler(console_handler)

        if settings.LOG_FILE:
            log_file = Path(settings.LOG_FILE)
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10485760,  # 10MB
                backupCount=5
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(ContextualFormatter(detailed_format))
            logger.addHandler(file_handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.debug(
        "Logging initialized",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "json_logging": is_production
        }
    )

    return logger


# Create logger instance
logger: CampusCoreLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_entity',
    'set_entity',
    'get_request_seq',
    'set_request_seq',
    'CampusCoreLogger',
]
