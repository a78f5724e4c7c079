"""
Structured Logging Configuration

Every line carries the service name plus the request id and, once the
session cookie has been verified, the caller's uid.
"""

import logging
import sys
from typing import Any, Dict

from fastapi import Request
import structlog

from floortrack.core.config import settings

SERVICE_NAME = "floortrack-api"

# Keys bound per request; never carried over to the next request
REQUEST_CONTEXT_KEYS = ("request_id", "uid")

# Libraries that would otherwise duplicate our own access and query logs
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore")


def add_service_name(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def drop_unset_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Anonymous requests log no uid rather than uid=None"""
    for key in REQUEST_CONTEXT_KEYS:
        if event_dict.get(key) is None:
            event_dict.pop(key, None)
    return event_dict


def setup_logging():
    """Configure structlog on top of stdlib logging"""

    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level if settings.DEBUG else max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            drop_unset_context,
            add_service_name,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if settings.is_production
            else structlog.dev.ConsoleRenderer(colors=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def bind_request_context(request: Request, request_id: str) -> None:
    """Start a fresh logging context for an incoming request"""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)
    request.state.request_id = request_id


def bind_session_uid(request: Request, uid: str) -> None:
    """
    Attach the verified caller to the request.

    Contextvars bound inside an endpoint do not flow back out to the
    middleware that wrapped it, so the uid is also kept on request.state
    for the access log line.
    """
    structlog.contextvars.bind_contextvars(uid=uid)
    request.state.uid = uid


def request_log_context(request: Request) -> Dict[str, Any]:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "uid": getattr(request.state, "uid", None),
    }
