"""structlog setup for the command host.

Production gets one JSON object per line; any other environment gets
console output, colored only when the stream is a terminal. Records go
to stderr so command output on stdout can be piped. Site fan-out binds
``site_id`` / ``site_name`` as contextvars, which every record picks up.
"""

import logging
import sys
from typing import TextIO

import structlog

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"password", "secret", "token", "database_url", "authorization"}
)
REDACTED = "***REDACTED***"

NOISY_LOGGERS: tuple[str, ...] = ("sqlalchemy.engine", "alembic")


def _redact_sensitive_keys(
    logger: logging.Logger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Replace the value of any key named in SENSITIVE_KEYS (case-insensitive)."""
    return {
        key: REDACTED if key.lower() in SENSITIVE_KEYS else value
        for key, value in event_dict.items()
    }


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _redact_sensitive_keys,
    ]


def _renderer(environment: str, stream: TextIO) -> structlog.types.Processor:
    if environment == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    environment: str = "development",
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Route structlog through the stdlib root logger.

    Args:
        environment: 'production' for JSON lines, anything else for
            console output.
        log_level: Level name for the root logger, in any case.
        stream: Where records are written; stderr when omitted.
    """
    stream = stream or sys.stderr

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(environment, stream),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
