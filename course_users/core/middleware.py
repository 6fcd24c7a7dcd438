"""Per-request context binding and access logging."""

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from course_users.core.context import (
    clear_context,
    set_correlation_id,
    set_course_id,
    set_request_id,
    set_trace_id,
)


logger = structlog.get_logger(__name__)


def trace_id_from_traceparent(value: str | None) -> str | None:
    """Trace id field of a W3C ``traceparent`` (version-trace-parent-flags)."""
    if not value:
        return None
    fields = value.split("-")
    return fields[1] if len(fields) >= 2 else None


def course_id_from_query(value: str | None) -> int | None:
    """Course selected on the report page, when it is a whole number."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds request, trace and course ids for the duration of a request.

    Log lines emitted while handling the request carry those ids. The request
    id is echoed back in ``X-Request-ID`` and the context is cleared once the
    response has been produced.
    """

    REQUEST_ID_HEADER = "X-Request-ID"
    TRACE_ID_HEADER = "X-Trace-ID"
    CORRELATION_ID_HEADER = "X-Correlation-ID"
    TRACEPARENT_HEADER = "traceparent"

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = tuple(exclude_paths or ["/health"])

    def bind_context(self, request: Request) -> str:
        """Populate the context variables from headers and query; return the id."""
        headers = request.headers
        request_id = set_request_id(headers.get(self.REQUEST_ID_HEADER))
        request.state.request_id = request_id

        trace_id = headers.get(self.TRACE_ID_HEADER) or trace_id_from_traceparent(
            headers.get(self.TRACEPARENT_HEADER)
        )
        if trace_id:
            set_trace_id(trace_id)
        correlation_id = headers.get(self.CORRELATION_ID_HEADER)
        if correlation_id:
            set_correlation_id(correlation_id)

        set_course_id(course_id_from_query(request.query_params.get("course")))
        return request_id

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        request_id = self.bind_context(request)
        path = request.url.path
        access_log = self.log_requests and not path.startswith(self.exclude_paths)

        def elapsed_ms() -> float:
            return round((time.perf_counter() - started) * 1000, 2)

        if access_log:
            logger.info(
                "request_started",
                method=request.method,
                path=path,
                query=str(request.query_params) or None,
                client_ip=request.client.host if request.client else None,
            )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                error_type=type(e).__name__,
                duration_ms=elapsed_ms(),
            )
            clear_context()
            raise

        if access_log:
            emit = logger.warning if response.status_code >= 400 else logger.info
            emit(
                "request_completed",
                method=request.method,
                path=path,
                status_code=response.status_code,
                content_type=response.headers.get("content-type"),
                duration_ms=elapsed_ms(),
            )

        response.headers[self.REQUEST_ID_HEADER] = request_id
        clear_context()
        return response


__all__ = ["RequestContextMiddleware"]
