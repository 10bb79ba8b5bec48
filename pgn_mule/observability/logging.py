"""
Structured logging configuration using structlog.

JSON lines in production, colored console output elsewhere. Library
modules log through the standard ``logging`` module; their records are
rendered by the same processor chain, so a source bound with
``poll_context`` shows up on every line of its poll cycle, httpx and
store warnings included.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from pgn_mule import __version__
from pgn_mule.config.settings import get_settings

APP_NAME = "pgn-mule"


def add_app_info(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp every event with the relay name and version."""
    event_dict.setdefault("app", APP_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


@contextmanager
def poll_context(source: str) -> Iterator[None]:
    """Bind ``source`` to every log line emitted in this task until exit."""
    with structlog.contextvars.bound_contextvars(source=source):
        yield


def setup_logging() -> None:
    """
    Configure structlog and route stdlib records through it.

    Usage:
        setup_logging()
        logger = structlog.get_logger()
        logger.info("Polled source", source="wch-r1", games=12)
    """
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    render_chain: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if settings.is_production:
        shared_processors.append(add_app_info)
        render_chain += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        render_chain.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=render_chain,
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(handlers=[handler], level=getattr(logging, settings.log_level))

    # Every poll goes through httpx; keep its per-request lines out of INFO
    for noisy in ("httpx", "httpcore", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger (defaults to the module name)."""
    return structlog.get_logger(name)
