# Core infrastructure
from course_users.core.context import (
    RequestContext,
    clear_context,
    get_context,
    get_course_id,
    get_request_id,
    set_correlation_id,
    set_course_id,
    set_request_id,
    set_trace_id,
)
from course_users.core.logging import configure_structlog, get_logger
from course_users.core.middleware import RequestContextMiddleware


__all__ = [
    "RequestContext",
    "RequestContextMiddleware",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_course_id",
    "get_logger",
    "get_request_id",
    "set_correlation_id",
    "set_course_id",
    "set_request_id",
    "set_trace_id",
]
