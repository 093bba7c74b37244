"""Structured Logging

structlog on top of the stdlib logging tree, so uvicorn and library
records share one format:
- console output while developing, JSON lines in production
- correlation id, route template and request slot carried as context
- credentials passed in query strings masked before rendering

Usage:
    from core.logging import schema_logger, slot_context

    log = schema_logger()
    with slot_context("query"):
        log.info("request_slot_validated", fields=["page"])
"""
import logging
import sys
from contextlib import AbstractContextManager
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "query-coercion"

# Query parameter names whose values never reach the logs
CREDENTIAL_PARAMS = frozenset({"token", "access_token", "api_key", "apikey", "password", "secret", "signature"})
MASK = "[REDACTED]"


def _mask_query_credentials(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential values in the `query` field of request events."""
    query = event_dict.get("query")
    if isinstance(query, dict):
        event_dict["query"] = {
            name: MASK if name.lower() in CREDENTIAL_PARAMS else value
            for name, value in query.items()
        }
    return event_dict


def _add_service(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_service,
        _mask_query_credentials,
    ]


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Route structlog and stdlib records through one handler on stdout."""
    shared = _shared_processors()
    renderer = (
        structlog.processors.JSONRenderer() if json_logs
        else structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
    )

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn records propagate to the root handler
    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).handlers = []
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def api_logger() -> structlog.stdlib.BoundLogger:
    """Requests and the diagnostics endpoints."""
    return get_logger("coercion.api")


def schema_logger() -> structlog.stdlib.BoundLogger:
    """Schema rewriting at registration and slot validation per request."""
    return get_logger("coercion.schema")


# ============================================================================
# Request context
# ============================================================================

def generate_correlation_id() -> str:
    return str(uuid4())[:8]


def bind_context(**kwargs) -> None:
    """Attach values to every later log event in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def route_context(route: str) -> AbstractContextManager:
    """Tag events with the route template ("/users/{user_id}") for a block."""
    return structlog.contextvars.bound_contextvars(route=route)


def slot_context(slot: str) -> AbstractContextManager:
    """Tag events with the request slot being parsed for a block."""
    return structlog.contextvars.bound_contextvars(slot=slot)
