"""
Structured logging for the Feature Proxy.

Every line is a JSON object carrying ``event``, ``level``, ``logger``,
``service``, an ISO-8601 UTC ``timestamp`` and, inside a request, the
``request_id`` set by the HTTP middleware.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Callable, Dict, IO, Optional
from contextvars import ContextVar

HANDLER_NAME = "feature-proxy"

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)

Processor = Callable[[Any, str, Dict[str, Any]], Dict[str, Any]]


def _service_processor(service_name: str) -> Processor:
    def add_service(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service


def add_request_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def configure_logging(service_name: str, log_level: str = "info", stream: Optional[IO[str]] = None) -> None:
    """Route structlog through stdlib logging and emit JSON lines to ``stream``.

    Calling this again replaces the handler installed by the previous call.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _service_processor(service_name),
            add_request_id,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind a request ID (generated when not supplied) to the current context."""
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def clear_context():
    request_id_var.set(None)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
