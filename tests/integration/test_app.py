"""Test application setup for integration tests."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.main import include_routers, register_exception_handlers, register_middleware


@asynccontextmanager
async def _test_lifespan(app: FastAPI):
    """Test lifespan that doesn't initialize database."""
    # Startup
    yield
    # Shutdown


def create_test_app() -> FastAPI:
    """Create FastAPI app for testing without database initialization."""
    app = FastAPI(
        title="Auth Module Test",
        description="Test instance",
        version="1.0.0",
        lifespan=_test_lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    include_routers(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app
