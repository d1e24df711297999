"""Structured logging configuration using structlog.

Modules log through the standard library (``logging.getLogger(__name__)``);
their records are rendered by structlog's ``ProcessorFormatter`` so that
stdlib and structlog events share one JSON (or console) format.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from docsearcher.config.settings import ObservabilitySettings

_HANDLER_NAME = "docsearcher"

# Engine client libraries log every request at INFO
_NOISY_LOGGERS = ("elastic_transport", "elasticsearch", "opensearch")


def setup_logging(settings: ObservabilitySettings | None = None) -> None:
    """Configure structured logging for doc-searcher.

    Safe to call more than once; the handler installed by a previous call
    is replaced.

    Args:
        settings: Observability settings. Uses defaults if None.
    """
    log_level = getattr(settings, "log_level", "info").upper() if settings else "INFO"
    log_format = getattr(settings, "log_format", "json") if settings else "json"
    level = getattr(logging, log_level, logging.INFO)

    shared: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "console":
        renderers: list = [structlog.dev.ConsoleRenderer()]
    else:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.UnicodeDecoder(),
                *renderers,
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
