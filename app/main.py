"""Main FastAPI application entry point."""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.dependencies import get_password_service, get_token_service
from app.api.v1.endpoints.auth.routes import router as auth_router
from app.api.v1.endpoints.health.routes import router as health_router
from app.api.v1.endpoints.users.routes import router as users_router
from app.core.exceptions import DomainException
from app.infrastructure.database.init_db import create_tables, seed_accounts
from app.infrastructure.database.session import close_db_connections
from app.utils.logging import request_id_var, setup_logging
from app.settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events."""
    logger = logging.getLogger("app")

    try:
        setup_logging()
        logger.info("Starting Auth Module...")

        # Fails fast on an unusable signing secret.
        get_token_service()

        await create_tables()
        logger.info("Database tables ready")

        await seed_accounts(get_password_service())

        logger.info("Auth Module started successfully")

    except Exception:
        logger.exception("Startup failed")
        raise

    yield

    logger.info("Shutting down Auth Module...")

    try:
        get_password_service().shutdown()
        get_password_service.cache_clear()
        await close_db_connections()
        logger.info("Database connections closed")
    except Exception:
        logger.exception("Shutdown error")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    include_routers(app)

    register_exception_handlers(app)

    register_middleware(app)

    return app


def include_routers(app: FastAPI) -> None:
    """Mount the v1 API routers."""
    prefix = get_settings().api_v1_prefix

    app.include_router(health_router, prefix=prefix)
    app.include_router(auth_router, prefix=prefix)
    app.include_router(users_router, prefix=prefix)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Reject malformed request bodies before the core runs."""
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Invalid input data", "errors": errors},
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        """Handle custom domain exceptions."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": exc.message, "type": exc.__class__.__name__},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle FastAPI HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail, "type": "HTTPException"},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger = logging.getLogger("app")
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "type": "InternalError"},
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware."""

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log every request under a request ID echoed back to the client."""
        logger = logging.getLogger("app")

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            logger.info(f"Request started: {request.method} {request.url.path} from {client_ip}")

            response = await call_next(request)

            process_time = time.perf_counter() - start_time
            logger.info(
                f"Request completed: {request.method} {request.url.path} "
                f"status={response.status_code} time={process_time:.3f}s"
            )
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        """Add security headers to responses."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"

        return response


app = create_app()


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint."""
    settings = get_settings()
    return {
        "message": settings.api_title,
        "version": settings.api_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
