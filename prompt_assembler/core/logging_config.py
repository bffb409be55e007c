"""Centralized logging configuration for the application.

Provides logging with separate files for:
- info.log: General application logs (INFO level and above)
- error.log: Error logs only (ERROR level and above)

Every record carries the current request ID, set by the HTTP middleware.
"""

import contextvars
import logging
import sys

import structlog

from prompt_assembler.core.config import Settings, get_settings

# Correlation ID (set by HTTP middleware)
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Adds ``request_id`` to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def _json_formatter() -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.ExtraAdder(allow=["request_id"]),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
        ],
    )


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure application logging with file and console handlers.

    Creates separate log files for info and error levels in
    ``settings.log_dir`` (skipped when unset).

    Args:
        settings: Application settings. If None, uses global settings.

    Returns:
        The configured root logger.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.log_level == "DEBUG" else getattr(
        logging, settings.log_level, logging.INFO
    )

    detailed_formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | rid=%(request_id)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    simple_formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | rid=%(request_id)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers.clear()

    if settings.log_dir is not None:
        log_dir = settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        # File handler for INFO and above (info.log)
        info_handler = logging.FileHandler(log_dir / "info.log", encoding="utf-8")
        info_handler.setLevel(logging.INFO)
        info_handler.setFormatter(detailed_formatter)
        info_handler.addFilter(RequestIdFilter())
        root_logger.addHandler(info_handler)

        # File handler for ERROR and above (error.log)
        error_handler = logging.FileHandler(log_dir / "error.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)
        error_handler.addFilter(RequestIdFilter())
        root_logger.addHandler(error_handler)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(_json_formatter() if settings.log_json else simple_formatter)
    console_handler.addFilter(RequestIdFilter())
    root_logger.addHandler(console_handler)

    return root_logger
