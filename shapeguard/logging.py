"""Structured Logging for shapeguard

structlog setup shared by every component:
- Colored, human-readable dev output
- JSON structured output for log shippers
- Context propagation through contextvars
- Domain loggers for parse and registry events

The library never configures logging on import; applications call
``configure_logging`` once (or wire structlog themselves).
"""
import logging
import sys

import structlog
from structlog.types import EventDict, Processor

from shapeguard.config import get_settings


def _add_library_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds library metadata."""
    event_dict.setdefault("library", "shapeguard")
    return event_dict


def _truncate_payloads(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that keeps raw input snapshots from flooding log lines."""
    limit = 200

    def _clip(obj: object) -> object:
        text = obj if isinstance(obj, str) else None
        if text is not None and len(text) > limit:
            return f"{text[:limit]}...[{len(text) - limit} more]"
        return obj

    return {k: _clip(v) for k, v in event_dict.items()}


def get_shared_processors() -> list[Processor]:
    """Processors used in both dev and prod configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_library_info,
        _truncate_payloads,
    ]


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to settings.
        json_logs: If True, output JSON format. If False, colored console output.
    """
    settings = get_settings()
    level = level or settings.LOG_LEVEL
    json_logs = settings.LOG_JSON if json_logs is None else json_logs
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = get_shared_processors()

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class LoggerRegistry:
    """Registry of pre-configured loggers for the library's domains."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        """Get or create a logger for the given domain."""
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"shapeguard.{name}")
        return cls._loggers[name]


def parse_logger() -> structlog.stdlib.BoundLogger:
    """Logger for parse execution events."""
    return LoggerRegistry.get("parse")


def registry_logger() -> structlog.stdlib.BoundLogger:
    """Logger for global registry changes."""
    return LoggerRegistry.get("registry")
