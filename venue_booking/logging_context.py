"""Request ID logging context for tracing a single HTTP request across modules.

The middleware in ``main.py`` calls :func:`set_request_id` for every inbound
request; :class:`RequestIdFilter` copies the value onto each log record so the
formatter can include ``%(request_id)s``.
"""

import logging
import uuid
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current context."""
    _request_id.set(request_id)


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True
