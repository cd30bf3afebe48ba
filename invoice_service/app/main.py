from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI

from invoice_service.app.api.v1.events import router as events_router
from invoice_service.app.api.v1.health import router as health_router
from invoice_service.app.api.v1.invoices import invoice_router
from invoice_service.app.core.database import (
    InvoiceServiceDatabaseManager,
    create_database_manager,
)
from invoice_service.app.core.event_management import close_events, init_events
from invoice_service.app.core.settings import InvoiceServiceSettings, get_settings
from invoice_service.app.events.event_producers import InvoiceEventProducer
from invoice_service.app.middleware.error.error_handler import (
    setup_invoice_error_handling,
)
from invoice_service.app.utils.logging import setup_invoice_logging as setup_logging

settings = get_settings()
environment = settings.ENVIRONMENT.lower()
enable_file_logging = environment in ["production", "staging"]

logger = setup_logging(
    "invoice_service",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=enable_file_logging,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown."""

    try:
        await _initialize_services(app)
    except Exception as e:
        await _handle_startup_error(e)
        raise

    yield
    await _shutdown_services(app)


async def _initialize_services(app: FastAPI) -> None:
    """Initialize all application services during startup."""

    app_settings: InvoiceServiceSettings = app.state.settings
    logger.info(
        "Starting invoice service initialization",
        extra={
            "environment": app_settings.ENVIRONMENT,
            "debug_mode": app_settings.DEBUG,
            "file_logging_enabled": enable_file_logging,
            "service_version": app_settings.APP_VERSION,
        },
    )

    _init_event_publisher(app)
    await _init_database(app)

    logger.info("Invoice service started successfully")


def _init_event_publisher(app: FastAPI) -> None:
    """Create the event producer unless one was injected."""

    if app.state.event_producer is None:
        app.state.event_producer = init_events(app.state.settings)
        app.state.owned_resources.append("event_producer")
    logger.info("Event publisher started")


async def _init_database(app: FastAPI) -> None:
    """Create the database manager unless one was injected, then the tables."""

    if app.state.database_manager is None:
        app.state.database_manager = create_database_manager(app.state.settings)
        app.state.owned_resources.append("database_manager")

    await app.state.database_manager.create_tables()
    logger.info("Database initialization completed")


async def _handle_startup_error(error: Exception) -> None:
    """Handle startup errors with proper logging."""

    logger.error(
        "Failed to start invoice service",
        exc_info=True,
        extra={
            "error_type": type(error).__name__,
        },
    )


async def _shutdown_services(app: FastAPI) -> None:
    """Close the resources created during startup."""

    try:
        logger.info("Starting invoice service shutdown")

        if "event_producer" in app.state.owned_resources:
            await close_events(app.state.event_producer)
        if "database_manager" in app.state.owned_resources:
            await app.state.database_manager.close()

        logger.info("Invoice service shutdown completed")

    except Exception as e:
        logger.error(
            "Error during invoice service shutdown",
            exc_info=True,
            extra={
                "error_type": type(e).__name__,
            },
        )
        raise


def create_app(
    app_settings: Optional[InvoiceServiceSettings] = None,
    database_manager: Optional[InvoiceServiceDatabaseManager] = None,
    event_producer: Optional[InvoiceEventProducer] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The database manager and event producer are created by the lifespan
    when not given; given ones are left open on shutdown.
    """

    app_settings = app_settings or settings
    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        debug=app_settings.DEBUG,
        lifespan=lifespan,
        openapi_url="/openapi.json" if app_settings.DEBUG else None,
        docs_url="/docs" if app_settings.DEBUG else None,
        redoc_url="/redoc" if app_settings.DEBUG else None,
    )
    app.state.settings = app_settings
    app.state.database_manager = database_manager
    app.state.event_producer = event_producer
    app.state.owned_resources = []

    _setup_middleware(app)
    _setup_routers(app)

    return app


def _setup_middleware(app: FastAPI) -> None:
    """Configure all middleware components with detailed logging."""

    logger.info(
        "Configuring FastAPI application",
        extra={
            "app_name": app.title,
            "app_version": app.version,
            "debug_mode": app.debug,
            "docs_enabled": app.docs_url is not None,
        },
    )

    setup_invoice_error_handling(app)
    logger.info("Error handling middleware configured")


def _setup_routers(app: FastAPI) -> None:
    """Configure all application routers with detailed logging."""

    routers_info: list[dict[str, Any]] = []

    app.include_router(health_router, tags=["Health"])
    routers_info.append({"router": "health", "prefix": "", "tags": ["Health"]})

    app.include_router(events_router, tags=["Dapr Events"])
    routers_info.append({"router": "events", "prefix": "", "tags": ["Dapr Events"]})

    app.include_router(invoice_router, prefix="/api/v1", tags=["Invoices"])
    routers_info.append({"router": "invoice", "prefix": "/api/v1", "tags": ["Invoices"]})

    logger.info(
        "API routes configured",
        extra={"total_routers": len(routers_info), "routers": routers_info},
    )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(  # type: ignore
        "invoice_service.app.main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )
