"""
Centralized Logging Configuration.

All modules log through structlog on top of the stdlib root logger.
Settings come from config/settings/logging.yaml (validated by
LoggingSchema); arguments to setup_logging override them.

Every record carries timestamp, level, logger, event, func_name and
lineno, plus request_id/method/path inside a request and user_id once
the bearer token has been resolved.

Values under credential-like keys (password, token, authorization,
api_secret...) are replaced with "[REDACTED]" before rendering.

Usage:
    from notely.core.logging import get_logger, setup_logging

    setup_logging()
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note.id})
"""

import logging
import sys
from collections.abc import MutableMapping
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import Processor

from notely.core.config import find_project_root, load_yaml_config
from notely.core.config_schema import LoggingSchema

REDACTED = "[REDACTED]"
SENSITIVE_KEYS = frozenset({
    "password",
    "current_password",
    "new_password",
    "hashed_password",
    "token",
    "authorization",
    "jwt_secret",
    "api_secret",
    "signature",
})

_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore")

_logging_config: LoggingSchema | None = None


def _load_logging_config() -> LoggingSchema:
    """
    Load and validate config/settings/logging.yaml once per process.

    Raises:
        FileNotFoundError: If logging.yaml does not exist
    """
    global _logging_config
    if _logging_config is None:
        _logging_config = LoggingSchema.model_validate(load_yaml_config("logging.yaml"))
    return _logging_config


def redact_sensitive(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential values, including inside the ``extra`` dict."""
    for key in list(event_dict):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    extra = event_dict.get("extra")
    if isinstance(extra, dict):
        event_dict["extra"] = {
            k: REDACTED if k.lower() in SENSITIVE_KEYS else v
            for k, v in extra.items()
        }
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        redact_sensitive,
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Replaces any handlers already attached to the root logger, so it is
    safe to call again (e.g. from run.py and then the app lifespan).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_type: Console output format, 'json' or 'console'.
        enable_console: Whether to log to stdout.
        enable_file_logging: Whether to write the rotating JSONL file.
    """
    config = _load_logging_config()
    handlers = config.handlers

    log_level = getattr(logging, (level or config.level).upper())
    console_format = format_type or config.format
    console_on = handlers.console.enabled if enable_console is None else enable_console
    file_on = handlers.file.enabled if enable_file_logging is None else enable_file_logging

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    json_formatter = _formatter(structlog.processors.JSONRenderer(), processors)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console_on:
        console_handler = logging.StreamHandler(sys.stdout)
        if console_format == "console":
            console_handler.setFormatter(
                _formatter(structlog.dev.ConsoleRenderer(colors=True), processors)
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if file_on:
        log_path = find_project_root() / handlers.file.path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=handlers.file.max_bytes,
            backupCount=handlers.file.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)
