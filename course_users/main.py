"""Course Users - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from course_users.config import Settings, get_settings
from course_users.core.context import get_request_id
from course_users.core.logging import configure_structlog, get_logger
from course_users.core.middleware import RequestContextMiddleware
from course_users.health import router as health_router
from course_users.reports.router import REPORT_PAGE_PATH
from course_users.reports.router import router as reports_router
from course_users.store import InMemoryLearningStore, LearningStore


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def build_learning_store(settings: Settings) -> LearningStore:
    """Create the store selected by ``store_backend``.

    Raises:
        StoreUnavailableError: If Cassandra cannot be reached
    """
    if settings.store_backend == "memory":
        if settings.store_seed_path:
            return InMemoryLearningStore.from_json_file(settings.store_seed_path)
        return InMemoryLearningStore()

    # Imported lazily so the memory backend never loads the driver
    from course_users.core.database import open_store_session
    from course_users.store.cassandra import CassandraLearningStore

    session = open_store_session(settings)
    return CassandraLearningStore(session=session, keyspace=settings.cassandra_keyspace)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the learning store on startup; close Cassandra on shutdown."""
    settings = get_settings()
    logger.info(
        "starting_application",
        version=settings.app_version,
        environment=settings.environment,
        store_backend=settings.store_backend,
    )

    app.state.learning_store = None
    try:
        app.state.learning_store = build_learning_store(settings)
        logger.info("learning_store_initialized", backend=settings.store_backend)
    except Exception as e:
        logger.warning(
            "store_init_skipped",
            error=str(e),
            message="Running without learning store - report routes return 503",
        )

    yield

    logger.info("shutting_down_application")
    if settings.store_backend == "cassandra":
        from course_users.core.database import close_store_session

        close_store_session()


def error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> ORJSONResponse:
    """JSON error body shared by every handler, tagged with the request id."""
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    return ORJSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "message": message,
            "status_code": status_code,
            "request_id": request_id,
            **extra,
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """JSON handlers for HTTP errors, validation errors and anything unhandled.

    Stack traces are logged, never returned.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )
        message = (
            str(exc.detail)
            if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
            else "Internal server error"
        )
        return error_response(
            request, exc.status_code, message, headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )
        details = [
            {
                "field": ".".join(str(part) for part in error.get("loc", [])),
                "message": error.get("msg", "Invalid value"),
            }
            for error in exc.errors()
        ]
        return error_response(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Validation error",
            details=details,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Store faults and bugs alike end here with a generic message."""
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE
        )


def register_routes(app: FastAPI) -> None:
    """Register the health probes and the report page handlers."""
    app.include_router(health_router)
    app.include_router(reports_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {
            "message": "Course Users",
            "version": settings.app_version,
            "report": REPORT_PAGE_PATH,
        }


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    interactive_docs = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Course Users - enrolled users report with CSV export",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if interactive_docs else None,
        redoc_url="/redoc" if interactive_docs else None,
        openapi_url="/openapi.json" if interactive_docs else None,
    )

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )
    register_exception_handlers(app)
    register_routes(app)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn using the ``api_*`` settings."""
    import uvicorn

    uvicorn.run(
        "course_users.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    run()
