"""Structured logging for pyreqs: structlog events rendered through stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

# Third-party loggers that log every request at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Route structlog and stdlib records to a single stderr handler.

    Arguments win over ``PYREQS_LOG_LEVEL`` (default INFO) and
    ``PYREQS_LOG_FORMAT`` (``console`` or ``json``). stdout stays free for
    ``pyreqs resolve -o -``.
    """
    log_level = (level or os.environ.get("PYREQS_LOG_LEVEL", "INFO")).upper()
    log_format = (fmt or os.environ.get("PYREQS_LOG_FORMAT", "console")).lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers = {"pyreqs": {"level": log_level}}
    loggers.update({name: {"level": "WARNING"} for name in _QUIET_LOGGERS})

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "pyreqs": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "pyreqs",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": loggers,
        }
    )
