from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from invoice_service.app.core.settings import InvoiceServiceSettings, get_settings
from invoice_service.app.models import InvoiceServiceBase

from ..utils.logging import setup_invoice_logging as setup_logging

logger = setup_logging("invoice_service.database", log_level=get_settings().LOG_LEVEL)


def _mask_database_url(database_url: str) -> str:
    if "@" not in database_url:
        return database_url
    return database_url.split("@")[0].rsplit(":", 1)[0] + ":***@***"


class InvoiceServiceDatabaseManager:
    """Database manager for the Invoice Service."""

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 40,
    ) -> None:
        logger.info(
            "Initializing Invoice Service database manager",
            extra={
                "operation": "database_manager_init",
                "database_url": _mask_database_url(database_url),
                "echo": echo,
                "event_type": "database_manager_initialization",
            },
        )

        engine_kwargs: Dict[str, Any] = {
            "echo": echo,
            "future": True,
        }

        if "sqlite" in database_url:
            # SQLite configuration for development and tests
            engine_kwargs["connect_args"] = {
                "timeout": 60,
                "check_same_thread": False,
            }
        else:
            engine_kwargs.update(
                {
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                    "pool_timeout": 45,
                    "pool_recycle": 3600,
                    "pool_pre_ping": True,
                    "pool_reset_on_return": "commit",
                    "connect_args": {
                        "command_timeout": 30,
                        "prepared_statement_cache_size": 0,
                    },
                }
            )

        self.async_engine = create_async_engine(database_url, **engine_kwargs)
        self.async_session_maker = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            autocommit=False,
        )

    async def create_tables(self) -> None:
        """Create all Invoice Service database tables."""

        async with self.async_engine.begin() as conn:
            await conn.run_sync(InvoiceServiceBase.metadata.create_all, checkfirst=True)
        logger.info(
            "Database tables created successfully",
            extra={
                "operation": "create_tables",
                "event_type": "database_tables_created",
            },
        )

    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session for the Invoice Service."""

        async with self.async_session_maker() as session:
            yield session

    async def close(self) -> None:
        """Close the database engine and its pooled connections."""

        await self.async_engine.dispose()
        logger.info(
            "Invoice Service database connections closed",
            extra={
                "operation": "database_close_complete",
                "event_type": "database_shutdown_complete",
            },
        )


def create_database_manager(
    settings: InvoiceServiceSettings,
) -> InvoiceServiceDatabaseManager:
    """Build a database manager from settings."""

    if not settings.INVOICE_DATABASE_URL:
        error_msg = "INVOICE_DATABASE_URL is required for Invoice Service but not configured"
        logger.error(
            error_msg,
            extra={
                "operation": "database_init",
                "database_configured": False,
                "event_type": "database_config_missing",
            },
        )
        raise ValueError(error_msg)

    return InvoiceServiceDatabaseManager(
        database_url=settings.INVOICE_DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
    )
