"""
Main FastAPI application for the Repo Access Relay.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import Settings, check_settings, get_settings
from .services.access_provider import AccessProvider, GitHubAccessProvider
from .services.access_service import AccessService
from .services.notifier import Notifier, SmtpNotifier
from .tools.access import router as access_router
from .utils.exceptions import setup_exception_handlers
from .utils.logging import setup_logging
from .utils.middleware import AccessLogMiddleware, FixedWindowRateLimiter, RateLimitMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_file)
    logger.info("Starting Repo Access Relay", port=settings.port, owner=settings.owner)

    yield

    await app.state.access_provider.close()
    logger.info("Shutting down Repo Access Relay")


def create_app(
    settings: Settings | None = None,
    notifier: Notifier | None = None,
    access_provider: AccessProvider | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the environment
        notifier: Notifier to use instead of SMTP
        access_provider: Access provider to use instead of GitHub

    Returns:
        Configured application
    """
    settings = settings or get_settings()
    check_settings(settings)

    app = FastAPI(
        title="Repo Access Relay",
        description="Relays repository access requests by email and grants collaborator access on approval",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Capabilities are built once and shared by every request
    notifier = notifier or SmtpNotifier(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.email_user,
        password=settings.email_pass,
        use_ssl=settings.smtp_use_ssl,
        timeout=settings.smtp_timeout,
    )
    access_provider = access_provider or GitHubAccessProvider(
        token=settings.github_token,
        api_url=settings.github_api_url,
        timeout=settings.github_timeout,
    )
    app.state.settings = settings
    app.state.notifier = notifier
    app.state.access_provider = access_provider
    app.state.access_service = AccessService(settings, notifier, access_provider)
    app.state.rate_limiter = FixedWindowRateLimiter(settings.rate_limit_max, settings.rate_limit_window_seconds)

    # Last added runs first: CORS, then access log, then rate limiting
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(access_router, tags=["access"])

    @app.get("/health", operation_id="health_check")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "access-relay"}

    return app


# Application instance
app = create_app()
