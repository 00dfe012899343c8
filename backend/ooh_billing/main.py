"""
FastAPI application entry point.
Assembles the app with routers, middleware, lifespan handlers, and exception handlers.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ooh_billing.api.v1.router import api_router
from ooh_billing.core.config import settings
from ooh_billing.core.exceptions import setup_exception_handlers
from ooh_billing.core.logging import setup_logging
from ooh_billing.core.rate_limit import limiter
from ooh_billing.deps.di_container import get_container


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Configures logging and the dependency injection container.
    """
    setup_logging()
    app.state.container = get_container()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")

    yield

    logger.info(f"{settings.PROJECT_NAME} shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Pro-rata pricing and booking arithmetic for OOH media plans and campaigns",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Root-level health endpoint for load balancers
    from ooh_billing.api.v1.endpoints.health import get_health

    app.add_api_route("/health", get_health, methods=["GET"], include_in_schema=False)

    setup_exception_handlers(app)

    return app


app = create_app()
