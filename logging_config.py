"""Structured logging configuration for the meter exporters"""
import logging
import os
import sys
from typing import Any, Dict
import structlog
from structlog.stdlib import LoggerFactory
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer
from config import Config


def setup_structured_logging(config: Config) -> None:
    """Setup structured logging with JSON format for production and console for development"""

    # Ensure log directory exists
    config.log_file.parent.mkdir(parents=True, exist_ok=True)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    # Use JSON renderer for production, console for development
    is_development = os.getenv("ENVIRONMENT", "production").lower() == "development"
    if is_development:
        processors.append(ConsoleRenderer())
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, config.log_level.upper())

    file_handler = logging.FileHandler(str(config.log_file))
    file_handler.setLevel(level)

    # Logs go to stderr so stdout stays free for embedded metric documents
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[file_handler, console_handler],
        force=True,
    )

    # Vendor agents are chatty at INFO
    logging.getLogger('newrelic').setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


def log_publish_cycle(logger: structlog.stdlib.BoundLogger, meters_count: int, sent: int,
                      publish_time: float, failed: int = 0) -> None:
    """Log a finished publish cycle with structured data"""
    logger.info(
        "Publish cycle completed",
        meters_count=meters_count,
        sent=sent,
        failed=failed,
        publish_time_seconds=round(publish_time, 3),
        event_type="publish_cycle"
    )


def log_exporter_startup(logger: structlog.stdlib.BoundLogger, config: Config) -> None:
    """Log exporter startup with configuration details"""
    logger.info(
        "Exporter starting up",
        service_name=config.service_name,
        service_version=config.service_version,
        export_format=config.export_format.value,
        step_seconds=config.step,
        base_time_unit=config.base_time_unit.label,
        event_type="exporter_startup"
    )


def log_error(logger: structlog.stdlib.BoundLogger, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=True
    )
