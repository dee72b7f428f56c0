"""Structured logging configuration for class schema construction.

This module configures structlog for consistent, machine-readable logging
across all components with proper context management.
"""

import logging
import sys
import time
from typing import Any

import structlog
from structlog.typing import EventDict


def add_app_context(
    _logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application-specific context to log events."""
    event_dict["service"] = "classschema"
    event_dict["component"] = event_dict.get("logger", "unknown")
    return event_dict


def configure_logging(
    environment: str = "development", log_level: str = "INFO", json_logs: bool = False
) -> None:
    """Configure structured logging for the application.

    Args:
        environment: Application environment (development/production)
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR)
        json_logs: Whether to output JSON format logs
    """
    # Configure stdlib logging to work with structlog
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    # Determine output format based on environment
    if json_logs or environment == "production":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables, e.g. the class whose schema is being built."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


class SchemaOperationLogger:
    """Helper for logging schema operation performance and context."""

    def __init__(
        self, logger: structlog.stdlib.BoundLogger, operation: str, class_name: str
    ):
        self.logger = logger
        self.operation = operation
        self.class_name = class_name
        self.start_time: float | None = None
        self.summary: dict[str, Any] = {}

    def __enter__(self) -> "SchemaOperationLogger":
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Schema operation started",
            operation=self.operation,
            class_name=self.class_name,
        )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time is None:
            return

        duration = time.perf_counter() - self.start_time

        if exc_type is None:
            self.logger.info(
                "Schema operation completed",
                operation=self.operation,
                class_name=self.class_name,
                duration_ms=round(duration * 1000, 2),
                **self.summary,
            )
        else:
            self.logger.error(
                "Schema operation failed",
                operation=self.operation,
                class_name=self.class_name,
                duration_ms=round(duration * 1000, 2),
                error=str(exc_val),
                error_type=exc_type.__name__,
            )

    def log_progress(self, message: str, **kwargs: Any) -> None:
        """Log operation progress with context."""
        self.logger.debug(
            message,
            operation=self.operation,
            class_name=self.class_name,
            **kwargs,
        )

    def record(self, **kwargs: Any) -> None:
        """Attach summary values to the completion event."""
        self.summary.update(kwargs)
