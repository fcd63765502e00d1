"""
structlog setup for the gateway.

Every event logged while a request is being served carries that request's
id and, for GraphQL requests, the operation it runs.
"""

import logging
import secrets
import sys
import time
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
operation_ctx: ContextVar[str | None] = ContextVar("graphql_operation", default=None)

# Chatty per-call loggers of libraries the gateway drives itself
QUIET_LOGGERS = ("httpx", "httpcore")


class RequestContextFilter:
    """structlog processor stamping events with the current request."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        _ = logger, method_name

        request_id = request_id_ctx.get()
        if request_id:
            event_dict["request_id"] = request_id

        # An explicit graphql_operation on the event wins
        operation = operation_ctx.get()
        if operation:
            event_dict.setdefault("graphql_operation", operation)

        return event_dict


def configure_logging(debug: bool = False) -> None:
    """Route stdlib and structlog output to stdout.

    Args:
        debug: Colored console lines at DEBUG level instead of JSON at INFO
    """
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )
    # The remote client logs its own calls
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        RequestContextFilter(),
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for a gateway module; pass ``__name__``."""
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """New id for one request's log lines.

    Millisecond clock in hex followed by 24 random bits, so ids from one
    process sort roughly by arrival, e.g. ``19a3c5e2b1f-4be01c``.
    """
    return f"{time.time_ns() // 1_000_000:x}-{secrets.token_hex(3)}"


def set_request_context(request_id: str | None = None, operation: str | None = None) -> None:
    """Bind the request id (a fresh one when omitted) and GraphQL operation."""
    request_id_ctx.set(request_id or generate_request_id())
    if operation is not None:
        operation_ctx.set(operation)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    operation_ctx.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()
