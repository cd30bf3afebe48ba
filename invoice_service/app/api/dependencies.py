from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_service.app.core.database import InvoiceServiceDatabaseManager
from invoice_service.app.core.settings import InvoiceServiceSettings
from invoice_service.app.events.event_producers import InvoiceEventProducer
from invoice_service.app.repository.invoice_repository import InvoiceRepository
from invoice_service.app.services.invoice_service import InvoiceEventService


# --------------------------------------------------------------
# Application State Dependencies
# --------------------------------------------------------------
def get_app_settings(request: Request) -> InvoiceServiceSettings:
    """Provide the settings the application was created with"""

    return request.app.state.settings


def get_database_manager(request: Request) -> InvoiceServiceDatabaseManager:
    """Provide the database manager opened by the lifespan"""

    return request.app.state.database_manager


# --------------------------------------------------------------
# Database Dependency
# --------------------------------------------------------------
async def get_async_session(
    database_manager: InvoiceServiceDatabaseManager = Depends(get_database_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session"""

    async for session in database_manager.get_async_session():
        yield session


# --------------------------------------------------------------
# Event Producer Dependency
# --------------------------------------------------------------
def get_event_producer(request: Request) -> InvoiceEventProducer:
    """Provide InvoiceEventProducer instance"""

    return request.app.state.event_producer


# --------------------------------------------------------------
# Service Dependencies
# --------------------------------------------------------------
def get_invoice_event_service(
    session: AsyncSession = Depends(get_async_session),
    event_producer: InvoiceEventProducer = Depends(get_event_producer),
) -> InvoiceEventService:
    """Provide InvoiceEventService instance with database and event publishing"""

    return InvoiceEventService(session, event_producer)


def get_invoice_repository(
    session: AsyncSession = Depends(get_async_session),
) -> InvoiceRepository:
    return InvoiceRepository(session)
