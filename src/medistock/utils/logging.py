"""Logging configuration for the MediStock domain.

stdlib handlers carry the output; structlog shapes every record. Request
handlers bind ``request_id``/``path``/``user_id`` through ``add_context`` so
that every line emitted while serving a request is correlated.

Credentials never reach a log line: the ``redact_secrets`` processor masks
password, hash and token values wherever they appear in an event.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LOG_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

SECRET_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "current_password",
        "new_password",
        "token",
        "authorization",
        "x_auth_token",
    }
)
REDACTED = "***"

# 10 MiB per file, five rotations kept
_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5

_QUIET_LOGGERS = ("asyncio", "multipart", "protean", "sqlalchemy.engine")


def _environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def _renders_json() -> bool:
    return _environment() in ("production", "staging")


def get_log_level() -> str:
    """Log level from ``LOG_LEVEL``, else from the environment name."""
    return os.getenv("LOG_LEVEL", LOG_LEVELS.get(_environment(), "INFO"))


def redact_secrets(logger: Any, method_name: str, event_dict: dict) -> dict:
    """structlog processor that masks credential values before rendering."""
    for key in event_dict.keys() & SECRET_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str = "logs", log_file_prefix: str = "medistock") -> None:
    """Route the root logger to stdout, ``<prefix>.log`` and ``<prefix>_error.log``."""
    log_level = get_log_level()

    log_path = Path(os.getenv("MEDISTOCK_LOG_DIR", log_dir))
    log_path.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [
        console_handler,
        _rotating_file(log_path / f"{log_file_prefix}.log", log_level),
        _rotating_file(log_path / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer():
    if _renders_json():
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            ),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str = "logs", log_file_prefix: str = "medistock") -> None:
    """Configure stdlib handlers and the structlog pipeline."""
    setup_stdlib_logging(log_dir=log_dir, log_file_prefix=log_file_prefix)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind request-scoped values onto every subsequent log line."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
