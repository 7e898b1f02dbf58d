from __future__ import annotations

import logging
import sys
from typing import Any, Protocol

import structlog


class DiagnosticSink(Protocol):
    """Leveled event logger consumed by the transport.

    A structlog ``BoundLogger`` satisfies it; so does ``NullSink``.
    """

    def debug(self, event: str, *args: Any, **kw: Any) -> Any: ...

    def info(self, event: str, *args: Any, **kw: Any) -> Any: ...

    def error(self, event: str, *args: Any, **kw: Any) -> Any: ...

    def critical(self, event: str, *args: Any, **kw: Any) -> Any: ...


class NullSink:
    """Discards every event."""

    def debug(self, event: str, *args: Any, **kw: Any) -> None:
        pass

    def info(self, event: str, *args: Any, **kw: Any) -> None:
        pass

    def error(self, event: str, *args: Any, **kw: Any) -> None:
        pass

    def critical(self, event: str, *args: Any, **kw: Any) -> None:
        pass


def setup_logging(log_level: str = "INFO", debug: bool = False) -> None:
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
