"""Context variables describing the request being served.

Log processors read them, so report code never passes ids around. The
middleware binds request, trace and correlation ids from headers; the course
id is bound from the ``course`` query value and again when a report is built.
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import uuid4


request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
course_id_var: ContextVar[int | None] = ContextVar("course_id", default=None)

_CONTEXT_VARS: tuple[ContextVar[Any], ...] = (
    request_id_var,
    trace_id_var,
    correlation_id_var,
    course_id_var,
)


def set_request_id(request_id: str | None = None) -> str:
    """Bind the incoming request id, or a fresh UUID; return what was bound."""
    value = request_id or str(uuid4())
    request_id_var.set(value)
    return value


def get_request_id() -> str | None:
    return request_id_var.get()


def set_trace_id(trace_id: str | None) -> None:
    trace_id_var.set(trace_id)


def set_correlation_id(correlation_id: str | None) -> None:
    correlation_id_var.set(correlation_id)


def set_course_id(course_id: int | None) -> None:
    course_id_var.set(course_id)


def get_course_id() -> int | None:
    return course_id_var.get()


def get_context() -> dict[str, Any]:
    """Bound values keyed by variable name; unset ones are left out."""
    context: dict[str, Any] = {}
    for var in _CONTEXT_VARS:
        value = var.get()
        if value is not None:
            context[var.name] = value
    return context


def clear_context() -> None:
    """Unbind everything so values never leak into the next request."""
    for var in _CONTEXT_VARS:
        var.set(None)


class RequestContext:
    """Binds ids for a block of work outside an HTTP request (scripts, tests).

    Usage:
        with RequestContext(course_id=5):
            logger.info("exporting")  # carries request_id and course_id
    """

    def __init__(
        self,
        request_id: str | None = None,
        trace_id: str | None = None,
        course_id: int | None = None,
    ) -> None:
        self.values: dict[ContextVar[Any], Any] = {
            request_id_var: request_id or str(uuid4()),
            trace_id_var: trace_id,
            course_id_var: course_id,
        }
        self._tokens: list[Token[Any]] = []

    def __enter__(self) -> "RequestContext":
        self._tokens = [
            var.set(value) for var, value in self.values.items() if value is not None
        ]
        return self

    def __exit__(self, *_: object) -> None:
        for token in reversed(self._tokens):
            token.var.reset(token)
        self._tokens = []
