"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from pydantic import ValidationError

from gist import __version__
from gist.api.dependencies import get_settings
from gist.api.exceptions import GistAPIError
from gist.api.middleware.context import RequestContextMiddleware
from gist.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from gist.api.routes import register_routes
from gist.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    The app gets:
    - structured logging configured from settings
    - CORS and request context middleware
    - global exception handlers producing ErrorResponse bodies
    - OpenTelemetry instrumentation when tracing is enabled
    - the agent, conversation, turn, health and metrics routes
    """
    settings = get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_secrets=log_config.redact_secrets,
    )

    app = FastAPI(
        title="Gist API",
        description="Streams repository-exploring agent runs and stores their transcripts",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Trace-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    register_routes(app, settings)

    if settings.observability.tracing.enabled:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("opentelemetry_instrumentation_enabled")

    logger.info(
        "app_created",
        debug=settings.debug,
        agent_backend=settings.agent.backend,
        cors_origins=settings.api.cors_origins,
    )

    return app


def _validation_details(errors: list[dict]) -> list[ErrorDetail]:
    return [
        ErrorDetail(field=".".join(str(loc) for loc in error["loc"]), message=error["msg"])
        for error in errors
    ]


def _error_response(status_code: int, body: ErrorBody) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=body).model_dump(mode="json"),
    )


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(GistAPIError)
    async def gist_api_error_handler(request: Request, exc: GistAPIError) -> JSONResponse:
        """Handle GistAPIError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(
            exc.status_code,
            ErrorBody(code=exc.error_code, message=exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)
        return _error_response(
            400,
            ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=_validation_details(list(exc.errors())),
            ),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors raised inside handlers."""
        logger.warning("pydantic_validation_error", errors=exc.errors(), path=request.url.path)
        return _error_response(
            400,
            ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Data validation failed",
                details=_validation_details(list(exc.errors())),
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(
            500,
            ErrorBody(code=ErrorCode.INTERNAL_ERROR, message="An unexpected error occurred"),
        )

    logger.debug("exception_handlers_registered")


# Create the app instance for uvicorn
app = create_app()
