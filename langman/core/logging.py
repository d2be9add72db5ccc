"""Langman structured logging module."""

import inspect
import logging
import sys
from enum import Enum
from typing import Any, Optional

import structlog
from structlog.stdlib import BoundLogger

from langman.core.config import settings


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def configure_logging(
    log_level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> BoundLogger:
    """Configure structured logging for langman.

    Args:
        log_level: Optional override for the log level. Defaults to
            settings.LOG_LEVEL.
        json_output: Optional override for JSON rendering. Defaults to
            settings.LOG_JSON.

    Returns:
        Configured logger instance
    """
    # Suppress all logging during tests
    if _is_test_environment():
        logging.root.setLevel(logging.CRITICAL + 1)

        # Logs won't be emitted because the root logger level is above CRITICAL
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=logging.CRITICAL + 1,
            force=True,
        )
        return structlog.stdlib.get_logger()

    use_json = json_output if json_output is not None else settings.LOG_JSON

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    effective_log_level = log_level or settings.LOG_LEVEL
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, effective_log_level.upper(), logging.INFO),
    )

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Get a logger for the calling module with full path context."""
    current_frame = inspect.currentframe()
    if current_frame is None:
        return logger

    frame = current_frame.f_back
    if frame is None:
        return logger

    module = inspect.getmodule(frame)
    if module:
        module_name = module.__name__
        parts = module_name.split(".")
        context = {
            "component": parts[-1],
            "module_path": module_name,
        }
        return logger.bind(**context)

    return logger.bind(component="unknown")


class LogLevel(str, Enum):
    """Severity used by log_if_debug."""

    INFO = "info"
    WARN = "warning"
    ERROR = "error"


def log_if_debug(
    log: Any,
    debug: bool,
    event: str,
    level: LogLevel = LogLevel.INFO,
    **kwargs: Any,
) -> None:
    """Log at `level` when debug is enabled, otherwise at debug level.

    Args:
        log: Logger to emit on.
        debug: Whether the owning context runs in debug mode.
        event: Event name.
        level: Level used when debug is enabled.
        **kwargs: Structured context for the event.
    """
    if debug:
        getattr(log, LogLevel(level).value)(event, **kwargs)
    else:
        log.debug(event, **kwargs)
