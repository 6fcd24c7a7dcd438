"""structlog setup for the report service.

Events go to stdout (colored console in development, JSON on request) and to
two rotating JSON files under ``log_dir``: everything in ``<app>.log`` and
errors only in ``<app>.error.log``. Every event carries the request context
from ``course_users.core.context``, and credentials are masked before any
handler sees them.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

from course_users.core.context import get_context


if TYPE_CHECKING:
    from course_users.config.settings import Settings


SENSITIVE_KEYS = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "api_key",
        "apikey",
        "x-api-key",
        "authorization",
        "credentials",
    }
)

# Values shorter than this are fully masked; longer ones keep 2 chars each end
_MIN_MASK_LENGTH = 4

# Third-party loggers that are only interesting when something breaks
NOISY_LOGGERS = ("uvicorn.access", "uvicorn.error", "cassandra", "httpx", "multipart")


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Merge request_id, trace_id, course_id, ... into the event."""
    event_dict.update(get_context())
    return event_dict


def add_app_info_processor(settings: "Settings") -> Processor:
    """Processor stamping app name, version and environment on every event."""
    app_info = {
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }

    def processor(
        logger: logging.Logger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.update(app_info)
        return event_dict

    return processor


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def _mask(key: str, value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _mask(str(k), v) for k, v in value.items()}
    if not isinstance(value, str) or not _is_sensitive(key):
        return value
    if len(value) <= _MIN_MASK_LENGTH:
        return "***"
    return f"{value[:2]}{'*' * (len(value) - _MIN_MASK_LENGTH)}{value[-2:]}"


def filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask credentials (admin key, Cassandra password, ...) in events."""
    return {key: _mask(key, value) for key, value in event_dict.items()}


def build_shared_processors(settings: "Settings") -> list[Processor]:
    """Chain run for structlog events and for records from stdlib loggers."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        add_app_info_processor(settings),
        filter_sensitive_data,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_include_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    return processors


def _formatter(
    renderer: Processor, shared_processors: list[Processor]
) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )


def _console_renderer(settings: "Settings") -> Processor:
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=settings.is_development,
        exception_formatter=structlog.dev.plain_traceback,
    )


def open_log_file(
    path: Path, settings: "Settings", level: str
) -> RotatingFileHandler:
    """Rotating handler for ``path``, sized by the ``log_file_*`` settings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=settings.log_file_max_bytes,
        backupCount=settings.log_file_backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def configure_structlog(
    settings: "Settings",
    log_dir: Path | str | None = None,
) -> None:
    """Route structlog and stdlib logging to the console and log files.

    Args:
        settings: Application settings
        log_dir: Directory for the rotating files (defaults to ``logs``)
    """
    log_dir = Path(log_dir) if log_dir is not None else Path("logs")
    shared_processors = build_shared_processors(settings)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(settings.log_level)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(settings.log_level)
    console.setFormatter(_formatter(_console_renderer(settings), shared_processors))
    root_logger.addHandler(console)

    # Files are always JSON for log analysis
    json_formatter = _formatter(
        structlog.processors.JSONRenderer(), shared_processors
    )
    for file_name, level in (
        (f"{settings.app_name}.log", settings.log_level),
        (f"{settings.app_name}.error.log", "ERROR"),
    ):
        handler = open_log_file(log_dir / file_name, settings, level)
        handler.setFormatter(json_formatter)
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
