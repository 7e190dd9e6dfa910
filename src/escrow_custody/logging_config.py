"""structlog setup for the escrow registry.

Registry and settlement modules log dotted event names (``escrow.funded``,
``payment.transfer_simulated``) with keyword context. Each mutating call
binds ``operation``, ``caller`` and ``escrow_id`` through
``structlog.contextvars``, so those keys ride along on every entry logged
while the call runs. Entries go through the stdlib root logger and are
rendered as JSON or as colored console lines depending on ``Settings``.

Usage:
    from escrow_custody.logging_config import setup_logging, get_logger
    setup_logging()  # level and format from ESCROW_LOG_LEVEL / ESCROW_JSON_LOGS
    logger = get_logger(__name__)
    logger.info("escrow.created", escrow_id=1, amount=100)
"""

from __future__ import annotations

import logging
import sys

import structlog

from escrow_custody.config import get_settings


def setup_logging(log_level: str | None = None, json_logs: bool | None = None) -> None:
    """Route structlog through one stdout handler on the root logger.

    Either argument left as None is taken from ``get_settings()``. Calling
    this again replaces the handler rather than adding a second one.
    """
    if log_level is None or json_logs is None:
        settings = get_settings()
        log_level = log_level or settings.log_level
        json_logs = settings.json_logs if json_logs is None else json_logs

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    # exc_info has to become a dict before JSON rendering
    renderers: list[structlog.types.Processor]
    if json_logs:
        renderers = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger; modules pass ``__name__``."""
    return structlog.get_logger(name)
